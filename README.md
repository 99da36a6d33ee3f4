# bytetorrent

Split a file into fixed-size chunks and keep track of sharing it across a
swarm of peers. One peer (the host) holds the whole blob. Every other peer
pulls it chunk by chunk. For each chunk it asks every peer that is ahead of it
for one segment.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Reading a file into chunks

```python
from bytetorrent.chunks import DATA_CHUNK_SIZE, get_file_chunks, total_size

chunks = get_file_chunks("blob.bin")   # list of bytes, each at most 1024 long
print(len(chunks), total_size(chunks))
```

Every chunk except the last holds `DATA_CHUNK_SIZE` (1024) bytes. An empty
file gives no chunks. A missing or unreadable file raises the usual `OSError`.
`total_size` counts every chunk but the last as full and adds the length of
the last one.

## The swarm state

`bytetorrent.swarm.SwarmState` holds what one peer knows about the swarm:

- its own address and the host's address;
- the chunks it has;
- the peers it is connected to (`clients`, a dict of `Client`);
- the segments it is still waiting for (`pending`, a dict of `ChunkBounds`);
- `read_bytes` and `max_bytes`.

```python
from bytetorrent.swarm import SwarmState, extract_port

state = SwarmState("127.0.0.1:7001", "127.0.0.1:7001", chunks)
state.is_host()                         # True: this peer serves the blob
port = extract_port("127.0.0.1:7001")   # 7001
```

`extract_port` also accepts bracketed IPv6 addresses such as `"[::1]:7001"`.
It raises `ValueError` in these cases:

- the address has no port;
- the address has too many colons;
- the port is not a number;
- the port is above 65535.

### Registering peers

Register each connected peer with `add_client(addr, peer)`. A peer is any
object with a `send(message)` method.

### Handling incoming messages

Hand incoming messages to `dispatch(addr, message)`. It routes each message to
the matching handler, and raises `TypeError` for any other message type.

| Message            | Handler          | Meaning                                          |
|--------------------|------------------|--------------------------------------------------|
| `Greeting`         | `on_greeting`    | a peer says whether it is the host and how many bytes it holds |
| `Gimme`            | `on_gimme`       | a peer asks for a segment of a chunk; it is answered with `HereYaGo` if the segment is held |
| `HereYaGo`         | `on_hereyago`    | a peer delivers a requested segment              |
| `NewChunk`         | `on_newchunk`    | a peer announces how many bytes it now holds     |
| `PeerDisconnected` | `on_disconnect`  | a peer left the swarm and is dropped from `clients` |

### Downloading a blob

1. `greeting()` builds the `Greeting` a peer sends to every newcomer.
2. When a greeting from the host arrives, the state starts downloading.
3. `request_next_chunk_segs()` splits the next chunk evenly among the peers
   that are ahead. The last peer takes the remainder. One `Gimme` is sent to
   each of these peers, and the list of requested `ChunkBounds` is returned.
4. Once every segment of a chunk has arrived, `broadcast(...)` sends the new
   byte count to all clients as `NewChunk`.
5. The next chunk is then requested, until `is_complete()` is true.

### Segment bookkeeping

These methods are exposed directly as well:

- `has_chunk_segment`
- `expecting_chunk_seg`
- `add_chunk_segment`

`SegmentError` is raised when:

- a requested segment is out of bounds;
- a segment arrives that was not requested, or does not match the request;
- there is nothing left to request;
- no connected peer is ahead.

Handlers catch `SegmentError` and report it through the `logging` module
(logger `bytetorrent.swarm`); they do not raise it.

## What this package does not do

The package keeps the state of a transfer and builds the messages to exchange.
It does not move bytes over a network. It has none of the following:

- a socket layer or wire encoding for the messages;
- a discovery or rendezvous server for finding and joining a pool of peers;
- a command-line program.

To run a real transfer, supply peer objects that carry `send(message)` calls
to the other side. Then feed whatever arrives back into `SwarmState.dispatch`.