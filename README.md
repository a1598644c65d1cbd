# taskyml

`taskyml` reads Taskfile YAML documents (`Taskfile.yml`, `Taskfile.yaml`,
`Taskfile.dist.yml`, `Taskfile.dist.yaml`) into plain Python objects. It
follows included Taskfiles and namespaces their tasks, detects include
cycles, and merges variables and environments in declaration order.

## Installation

```
pip install taskyml
```

## Reading a Taskfile

```python
from taskyml.reader import ReaderNode, read_taskfile

taskfile, directory = read_taskfile(ReaderNode(dir="path/to/project"))

print(taskfile.version)
for name, task in sorted(taskfile.tasks.items()):
    print(name, task.desc)
```

`read_taskfile` returns the merged `Taskfile` and the directory its file was
found in. If no Taskfile is in the given directory, it searches the parent
directories, stopping at the file-system root or at a directory with a
different owner, and then raises `TaskfileNotFoundError`. An include cycle
raises `IncludeCycleError`; an included Taskfile that declares `dotenv`
files in a version 3 Taskfile raises `IncludedDotenvError`. An include marked
`optional` that cannot be found or read is skipped.

Included Taskfiles are merged under their namespace, so a task `build` in
an include named `docs` becomes `docs:build`. A task name that starts with
`:` always refers to the root Taskfile. If an include has a `default` task
and the root has no task of the namespace's name, the namespace itself (and
the include's aliases) become aliases of `<namespace>:default`. For
Taskfiles before version 3, an OS-specific `Taskfile_<os>.yml` next to the
main file is merged in as well.

The lower-level helpers are also available: `load_taskfile_file(path)`
parses one file without following includes, `find_taskfile(path)` and
`find_taskfile_upwards(path)` locate a Taskfile, and
`check_circular_includes(node)` checks a `ReaderNode` chain.

Variables from `Taskvars.yml` and the OS-specific `Taskvars_<os>.yml` are
loaded with `taskyml.reader.read_taskvars(directory)`.

## Building blocks

- `taskyml.vars`: `Var`, `Vars` (an ordered variable map with `set`, `get`,
  `merge`, `items`, `deep_copy`, `to_cache_map`) and `Call`.
- `taskyml.cmd`: `Cmd` and `Dep`, parsed from either short or long form,
  including deferred commands and deferred task calls.
- `taskyml.precondition`: `Precondition`, with a default failure message.
- `taskyml.platforms`: `Platform.parse("windows/amd64")`, raising
  `InvalidPlatformError` for unknown values; `is_known_os` and
  `is_known_arch`.
- `taskyml.output`: `Output` and `OutputGroup`.
- `taskyml.task`: `Task`, with `name()` and `deep_copy()`.
- `taskyml.included`: `IncludedTaskfile`, `IncludedTaskfiles`,
  `smart_join` and `expand_path`.
- `taskyml.taskfile`: `Taskfile` (with `parsed_version()`), `merge`,
  `task_name_with_namespace` and `TaskfileVersionError`.

Each model has a `from_node` class method that takes a PyYAML node, as
produced by `yaml.compose`:

```python
import yaml
from taskyml.precondition import Precondition

p = Precondition.from_node(yaml.compose("sh: '[ 1 = 0 ]'"))
assert p.msg == "[ 1 = 0 ] failed"
```

## What it does not do

`taskyml` only reads and merges Taskfile definitions. It does not run
tasks or shell commands, evaluate `sh` variables, expand templates in
variables or include paths, load the contents of dotenv files, check
sources or status for up-to-dateness, or watch files. There is no
command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```