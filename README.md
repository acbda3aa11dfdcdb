# jupiter

Small building blocks for services that measure and report their own
performance and that read their settings from a YAML file, which may
change while the service is running.

## Installation

```
pip install .
```

To run the tests, install the `test` extra and then run `pytest`:

```
pip install ".[test]"
pytest
```

## Formatting helpers

`jupiter.fmt` turns durations and sizes into short text that people can
read easily. It can also parse such text back into values:

```python
from datetime import timedelta
from jupiter.fmt import (
    format_duration,
    format_short_duration,
    format_size,
    parse_duration,
    parse_size,
)

format_short_duration(8_192)        # "8.19 ms"  (input in microseconds)
format_short_duration(1_128_123)    # "1.13 s"
format_size(8_734)                  # "8.53 KiB"
format_size(1)                      # "1 byte"
parse_size("8k")                    # 8192
parse_size("4 G")                   # 4 * 1024**3
parse_duration("12 s")              # timedelta(seconds=12)
parse_duration("100")               # timedelta(milliseconds=100)
format_duration(timedelta(milliseconds=62_013))  # "1m 2s 13ms"
```

Accepted suffixes:

- `parse_size` accepts `b`, `k`, `m`, `g` and `t`, in either case.
- `parse_duration` accepts `ms`, `s`, `m`, `h` and `d`, written all in
  lower case or all in upper case. A bare number counts as milliseconds.

Any other suffix raises `ValueError`, and so does a negative or decimal
number. `format_size` and `format_duration` also raise `ValueError` for
negative input.

## Sliding averages

`jupiter.average.Average` keeps a sliding average over roughly the last
hundred values. It also keeps the total number of values recorded. It is
safe to use from several threads.

```python
from jupiter.average import Average

avg = Average()
for value in (10, 20, 30):
    avg.add(value)

avg.avg()    # 20
avg.count()  # 3
str(avg)     # "20 us (3)"  (the average formatted as microseconds)
```

## Configuration

`jupiter.config.Config` holds the parsed first document of a YAML file.

- **Reading:** readers take a `Handle` from `current()`. A handle is a
  snapshot and does not change when a new configuration is loaded.
- **Listening:** listeners subscribe with `notifier()`. Each later load
  wakes them in `ChangeNotifier.recv(timeout)`, which returns `True` on a
  change and `False` when the timeout elapses.

```python
from jupiter.config import Config

config = Config("settings.yml")
notifier = config.notifier()

config.load_from_string("server:\n  port: 12345\n", None)
config.current().config()["server"]["port"]  # 12345
notifier.recv(timeout=1.0)                   # True: a change was announced

config.store("server:\n  port: 2410\n")      # validates, then writes the file
config.reload_if_changed()                   # True: picks up the newer file
```

How the methods behave:

- `load()` reads the file. If the path exists but is not a regular file,
  such as a directory, the load is skipped.
- `last_modified()` returns the file's modification time, or `None`.
- `reload_if_changed()` loads the file only if it is newer than the
  configuration loaded last, or if nothing has been loaded with a
  timestamp yet. It logs a load error and returns `False`.

Errors:

- Invalid YAML passed to `store` or `load_from_string` raises
  `ConfigError` and leaves the current configuration untouched.
- A file that cannot be read or written also raises `ConfigError`.

## What this package does not do

- It has no network server, no command dispatcher and no command-line
  program.
- It does not watch the configuration file by itself. To pick up changes
  on disk, call `Config.reload_if_changed()` periodically, for example
  from your own background thread.