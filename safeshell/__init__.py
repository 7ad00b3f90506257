"""An interactive shell that blocks dangerous commands, applies resource limits, runs pipes and matrix sums, and tracks run times."""

__version__ = "0.1.0"