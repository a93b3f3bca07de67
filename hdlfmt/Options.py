from dataclasses import dataclass
from os import getenv


def _flag(val):
    return val.lower() in ("1", "true", "yes", "on")


@dataclass
class FormatOptions:
    indent_width: int = 4
    use_tabs: bool = False
    # consecutive blank lines kept from the source
    max_blank_lines: int = 1

    @property
    def indent_unit(self):
        return "\t" if self.use_tabs else " " * self.indent_width

    @classmethod
    def from_env(cls, **overrides):
        opts = cls()
        if getenv("HDLFMT_INDENT_WIDTH"):
            opts.indent_width = int(getenv("HDLFMT_INDENT_WIDTH"))
        if getenv("HDLFMT_USE_TABS"):
            opts.use_tabs = _flag(getenv("HDLFMT_USE_TABS"))
        if getenv("HDLFMT_MAX_BLANK_LINES"):
            opts.max_blank_lines = int(getenv("HDLFMT_MAX_BLANK_LINES"))
        for name, val in overrides.items():
            if val is not None:
                setattr(opts, name, val)
        return opts
