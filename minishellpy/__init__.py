"""Building blocks of a small command shell: lexing, expansion, builtins, redirections and pipelines."""

__version__ = "0.1.0"