"""Runtime settings of a lampool session. Each can be given on the command line and changed with `:set`."""

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Stages:
    """The pipeline stages a toggle (bench or show) is turned on for."""
    ALL = ("lexer", "parser", "command", "compiler")

    on: Tuple[str, ...] = ()

    @classmethod
    def parse(cls, value):
        """Parses 'all', 'none' or a comma separated list of stage names. Raises ValueError with the first unknown
        name as its argument.
        """
        value = value.strip()
        if value == "all":
            return cls(cls.ALL)
        if value == "none":
            return cls()

        on = []
        for stage in value.split(","):
            stage = stage.strip()
            if stage not in cls.ALL:
                raise ValueError(stage)
            if stage not in on:
                on.append(stage)
        return cls(tuple(on))

    def __contains__(self, stage):
        return stage in self.on

    def __str__(self):
        return ",".join(self.on) if self.on else "none"


@dataclass
class Settings:
    prompt: str = "λ> "
    bench: Stages = field(default_factory=Stages)
    show: Stages = field(default_factory=lambda: Stages(("compiler",)))
