"""Read and merge Taskfile YAML definitions: tasks, includes, variables and platforms."""

__version__ = "0.1.0"