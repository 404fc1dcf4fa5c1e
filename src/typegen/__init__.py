"""typegen: algebraic type descriptions to ReasonML type declarations."""

__version__ = "0.1.0"
