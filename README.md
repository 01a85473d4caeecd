# automqtt

`automqtt` provides the pieces an MQTT v5 client needs to stay useful over an
unreliable link: reconnection backoff strategies, queues that hold messages
until they can be sent, a dispatcher that reports only the first error of a
connection, and helpers for the demo publisher and subscriber settings. It
uses only the Python standard library.

## Modules

### `automqtt.backoff`

A backoff is a callable that takes the attempt number and returns a
`datetime.timedelta`. Attempt `0` (the wait before the first attempt) is
always zero.

- `constant_backoff(delay)` – the same delay for every attempt after the first.
- `exponential_backoff(min_delay, max_delay, initial_max_delay, factor)` – a
  random delay between `min_delay` and a moving maximum that starts at
  `initial_max_delay` and grows by `factor` per attempt, capped at
  `max_delay`. Invalid settings raise `ValueError`.
- `default_exponential_backoff()` – 5 s minimum, 10 min maximum, 10 s initial
  maximum, factor 1.5.
- `rand_range(start, end)` – a random integer in `[start, end]`.

Delays may be given as `timedelta` objects or as seconds.

```python
from automqtt.backoff import default_exponential_backoff

delay_for = default_exponential_backoff()
delay_for(0)   # timedelta(0)
delay_for(3)   # a random delay between the minimum and the growing maximum
```

To watch how the default exponential backoff spreads its delays, run:

```
automqtt-backoff
```

It prints the smallest and largest delay (in milliseconds) seen after each
doubling of the number of attempts; `--rounds` sets how many doublings to
sample (default 22).

### `automqtt.queues`

- `automqtt.queues.base` – the `Queue` and `Entry` interfaces and the
  `QueueEmpty` exception.
- `automqtt.queues.memory.MemoryQueue` – items held in memory.
- `automqtt.queues.file.FileQueue(path, prefix, extension)` – one file per
  item in `path`, ordered by modification time. Creating the queue checks that
  a file can be written, read and removed there.

`enqueue` accepts bytes or a readable binary stream. `peek()` returns the
oldest item as an entry, or raises `QueueEmpty`; the entry must be finished
with exactly one of `leave()`, `remove()` or `quarantine()` before peeking
again. `reader()` gives a binary stream over the item. In a `FileQueue`,
quarantined files are kept with a `.CORRUPT` suffix; a `MemoryQueue` simply
drops them. Both queues offer `wait()` and `wait_for_empty()`, which return a
`threading.Event` that is set once the queue holds something or is empty.

```python
from automqtt.queues.memory import MemoryQueue

q = MemoryQueue()
q.enqueue(b"hello")
entry = q.peek()
data = entry.reader().read()
entry.remove()
```

### `automqtt.errors`

- `ConnectionDownError` – for requests made while the connection is down.
- `DisconnectError` – the server asked to disconnect.
- `ConnackError` – the server refused the connection; carries `reason_code`,
  `reason` and the underlying `err`. `new_connack_error(err, connack)` builds
  one from a CONNACK-like object with `reason_code` and optional
  `properties.reason_string`.
- `ErrorHandler(errors, debug=None, on_client_error=None,
  on_server_disconnect=None)` – puts only the first error it sees onto the
  `queue.Queue` given as `errors`; later ones are logged and dropped, and
  `shutdown()` stops all further reporting. User callbacks run in a
  background thread.

### `automqtt.prefix_logger`

`PrefixLogger(prefix, stream=None)` writes `<prefix>:<message>` lines to a
stream (stdout by default) through `println(*args)` and `printf(fmt, *args)`;
`printf` adds a missing trailing newline.

### `automqtt.message_log`

`MessageHandler(write_to_disk, file_name, write_to_stdout, stream=None)`
records received JSON payloads of the form `{"Count": n}`. `handle(payload)`
writes the count zero-padded to nine digits followed by the raw payload to
the file, and echoes the message to the stream if asked. It can be used as a
context manager; `close()` closes the file.

### `automqtt.envconfig`

Reads settings from environment variables (or any mapping passed as
`environ`):

- `string_from_env`, `int_from_env`, `milliseconds_from_env` and
  `boolean_from_env` (`TRUE`/`T`/`1`, `FALSE`/`F`/`0`, any case) raise
  `ConfigError` when a value is missing, blank or invalid.
- `publisher_config_from_env()` returns a `PublisherConfig` from the
  `pubdemo_*` variables.
- `subscriber_config_from_env()` returns a `SubscriberConfig` from the
  `subdemo_*` variables; the output file name is required only when writing
  to disk.

## What this package does not do

`automqtt` does not open network connections or speak the MQTT protocol
itself. There is no connection manager, no encoding or decoding of MQTT
packets, no TCP, TLS or WebSocket transport and no request/response helper.
The backoff strategies, queues and error dispatcher are meant to be used by
client code that provides those parts.