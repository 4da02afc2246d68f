# nashell

An interactive shell for Linux. It has built-in commands, a history of recent
commands, background and foreground jobs, I/O redirection and pipelines.

## Installing

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Running

```
nashell
nashell --home DIR
```

The prompt has the form `<user@host:dir>`. When the current directory lies
under the shell's home, the prompt shows it as a path that starts with `~`.
By default the shell's home is the directory you start the shell from. You
can set it with `--home DIR`. You can put several commands on one line by
separating them with `;`.

The shell stops when you type `quit` or when its input ends. Ctrl-C while a
foreground program runs sends SIGINT to that program. When a background job
has finished, the shell reports it before the next prompt. The report says
whether the job exited normally.

## Built-in commands

| Command | What it does |
| --- | --- |
| `cd [dir]` | Change directory. `~` expands to the shell's home. With no argument it goes to the home. |
| `pwd` | Print the current directory. |
| `echo words...` | Print the words separated by single spaces. Double quotes are dropped. |
| `ls [-l] [-a] [-la\|-al] [dir...]` | List directories sorted by name. `-l` gives the long format (permissions, links, owner, group, size, time). `-a` includes hidden entries. A flag applies to the directories that come after it. |
| `pinfo [pid]` | Show the state, virtual memory and executable path of a process. With no pid it shows the shell itself. |
| `history [n]` | Show the last `n` commands, 10 by default. |
| `nightswatch -n secs interrupt\|dirty` | Print the CPU interrupt counts (from `/proc/interrupts`) or the dirty memory line (from `/proc/meminfo`) every `secs` seconds. Type a line starting with `q` to stop. |
| `setenv var [value]` | Set an environment variable. With no value it is set to the empty string. |
| `unsetenv var` | Remove an environment variable. |
| `jobs` | List jobs as `[n] Running\|Stopped name [pid]`. |
| `kjob job signal` | Send signal number `signal` to job number `job`. |
| `bg job` | Send SIGCONT to a stopped job so that it continues in the background. |
| `fg job` | Continue a job in the foreground and wait for it. |
| `overkill` | Send SIGKILL to every job. |
| `cronjob -c cmd... -t secs -p period` | Run `cmd` every `secs` seconds, `period // secs` times. The repetitions run in a separate process. |
| `quit` | Save the history, kill all jobs and leave. |

Any other command runs as an external program in its own process group. The
shell waits for it to finish. If it is stopped (for example with Ctrl-Z), it
is added to the job list. If you end the command with `&` (either as a
separate word or attached to the last word), it runs in the background. The
shell then prints `[job] pid`.

### Redirection and pipelines

- `cmd < file` reads standard input from `file`. The file must exist.
- `cmd > file` writes standard output to `file` and truncates it first.
- `cmd >> file` appends standard output to `file`.
- `a | b | c` runs the stages in turn. Each stage's output becomes the next
  stage's input. A stage may be a built-in or an external program.

### History

Up to 20 commands are kept. If a command consists only of up-arrow key
sequences followed by Enter, the shell runs a command from the history
again: one arrow is the most recent command, two arrows the one before it,
and so on. The shell echoes the recalled command before it runs it.

The history is read at startup from `history.txt` in the shell's home
directory and written back by `quit`. Leaving through end of input does not
save it.

## Limitations

- The shell reads `/proc` for `pinfo`, `jobs` and `nightswatch`, so it works
  on Linux only.
- Words are split on whitespace. There is no quoting, globbing, variable
  expansion or escaping.
- Pipeline stages do not run at the same time. Each stage runs to completion
  before the next one starts, so a pipeline that never ends its first stage
  never moves on.
- A line can use either a pipeline or redirection, not both in the same
  command.