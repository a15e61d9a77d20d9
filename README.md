# cmdbuf

Command buffers for Python.

A *buffer* represents one command's execution. Reading it drives the
command and returns its output; a read that returns `b""` means the
command has finished. A *machine* creates buffers: any object with a
`command(ctx, *args)` method that returns a buffer will do. The package
defines the protocols and the helpers around them; you supply the
machine.

## Machines and buffers

`cmdbuf.buffer` defines the buffer protocols:

- `Buffer`: has `read(size=-1)`.
- `WriteBuffer`: also has `write(data)` and `close()` (closing stdin).
- `AttachBuffer`: also has `attach()`, connecting the command to the
  terminal.
- `LogBuffer`: also has `log(w)`, sending diagnostic output to `w`.

`attach(buf)` and `log(buf, w)` call those methods when the buffer has
them and do nothing otherwise. `fail(err)` returns a `FailBuffer` whose
every read raises `err`.

`cmdbuf.machine` defines the `Machine`, `OSMachine`, `ArchMachine` and
`ShutdownMachine` protocols, and `shutdown(ctx, m)`, which calls
`m.shutdown(ctx)` when the machine has it.

A tiny in-memory machine:

```python
import io

from cmdbuf.buffer import fail
from cmdbuf.env import Context
from cmdbuf.errors import CommandError
from cmdbuf.machine import read


class EchoMachine:
    def command(self, ctx, *args):
        if args[0] == "false":
            return fail(CommandError(code=1))
        return io.BytesIO((" ".join(args[1:]) + "\n").encode())


ctx = Context()
m = EchoMachine()
assert read(ctx, m, "echo", "hello") == "hello"
```

## Running commands

- `read(ctx, m, *args)` returns the output as a string with trailing
  whitespace removed.
- `do(ctx, m, *args)` runs the command and discards its output.
- `exec_(ctx, m, *args)` attaches the buffer to the terminal if it can,
  sends its log to stderr and streams its output to stdout. The streams
  used can be replaced by setting `cmdbuf.machine.STDOUT` and
  `cmdbuf.machine.STDERR`.

For `read` and `do`, when the buffer is a `LogBuffer`, its diagnostic
output is captured and stored on the `CommandError` that is raised.

Every helper traces the buffer before reading it: set
`cmdbuf.machine.TRACE` to a text stream to have a line written for each
command (its `str()` if it defines one, its `repr()` otherwise).

## Errors

`cmdbuf.errors.CommandError(code=0, err=None, log=b"")` describes a
failed command. Its message is the underlying error, or
`exit status <code>`, followed by the indented log lines.
`not_found(err)` is true when the first `CommandError` in the chain has an
underlying error and a code of 0, meaning the command never started.
`BufferClosedError` and `ReadOnlyBufferError` are raised by buffers that
are closed or accept no input.

## Contexts and environment

`cmdbuf.env.Context` is an immutable chain of key/value pairs
(`with_value`, `value`). Environment variables travel in it:
`with_env(ctx, env)` merges new values in, `unset_env(ctx, name)` removes
one, `without_env(ctx)` removes them all and `envs(ctx)` returns a copy of
what is set, or `None`.

## Pipelines

`cmdbuf.pipeline.copy(dst, src, *middle)` copies each stage's output into
the next stage's input, all stages running concurrently, and closes each
writer that can be closed when its copy ends. It returns the total number
of bytes written. If any stage fails it raises `CopyError`, whose
`results` hold a `CopyResult(cmd, err)` per stage and whose message lists
every stage with its error or `<success>`. Stages are named by
`describe(obj)`: their `str()`, or `<TypeName>`.

## Other pieces

- `cmdbuf.crlf.CRLFReader` wraps a binary reader and turns CRLF and lone
  CR into LF.
- `cmdbuf.shquote` has `quote`, `join` and `command_string` for showing
  commands as shell command lines.
- `cmdbuf.fsinfo` has `FileInfo`, `DirEntry` and `FsKind`, parsers for
  GNU, BSD and PowerShell stat output (`parse_gnu_stat`, `parse_bsd_stat`,
  `parse_windows_stat`) and `localize(kind, name)` for path separators.
- `cmdbuf.walk` has generators that parse directory listings into
  `DirEntry` values: `posix_walk_entries` (`ls -ld`), `dos_dir_entries`
  (`dir /a`) and `windows_walk_entries` (records split by 0x1E, fields by
  0x1F).

## What it does not do

The package ships no machines of its own: nothing here runs commands on
the local system, in containers or over a network, and it never starts a
process. It also has no filesystem built on commands: the stat and listing
parsers are provided, but not the operations that would run `stat`, `ls`
or `dir` and feed them. There is no command-line program.