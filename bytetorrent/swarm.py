"""State of a peer taking part in a chunked file transfer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from bytetorrent.chunks import DATA_CHUNK_SIZE, total_size

log = logging.getLogger(__name__)


class SegmentError(Exception):
    """A chunk segment request or response could not be honoured."""


class Peer(Protocol):
    def send(self, message: Any) -> None: ...


@dataclass(frozen=True)
class ChunkBounds:
    """A segment of a chunk expected from the peer at addr."""

    addr: str
    chunk_index: int
    start: int
    size: int


@dataclass(frozen=True)
class Greeting:
    is_host: bool
    read_bytes: int


@dataclass(frozen=True)
class Gimme:
    chunk_index: int
    start: int
    size: int


@dataclass(frozen=True)
class HereYaGo:
    chunk_index: int
    start: int
    size: int
    data: bytes


@dataclass(frozen=True)
class NewChunk:
    read_bytes: int


@dataclass(frozen=True)
class PeerDisconnected:
    pass


@dataclass
class Client:
    """A connected peer and how many bytes of the blob it holds."""

    peer: Peer
    read_bytes: int = 0


class SwarmState:
    """Bookkeeping for one node: what it holds, what it expects, who it knows."""

    def __init__(self, your_addr: str, host_addr: str, chunks=None) -> None:
        self.your_addr = your_addr
        self.host_addr = host_addr
        self.chunks: list[bytes | bytearray] = list(chunks) if chunks else []
        self.clients: dict[str, Client] = {}
        self.max_bytes = 0
        self.read_bytes = 0
        self.pending: dict[str, ChunkBounds] = {}

    def is_host(self) -> bool:
        return self.your_addr == self.host_addr

    def add_client(self, addr: str, peer: Peer) -> Client:
        client = Client(peer)
        self.clients[addr] = client
        return client

    def greeting(self) -> Greeting:
        """The greeting sent to a newly accepted peer."""
        return Greeting(self.is_host(), total_size(self.chunks))

    def dispatch(self, addr: str, message: Any) -> None:
        """Route a message received from addr to its handler."""
        handlers = {
            PeerDisconnected: self.on_disconnect,
            Greeting: self.on_greeting,
            Gimme: self.on_gimme,
            HereYaGo: self.on_hereyago,
            NewChunk: self.on_newchunk,
        }
        handler = handlers.get(type(message))
        if handler is None:
            raise TypeError(f"unknown message type {type(message).__name__}")
        if isinstance(message, PeerDisconnected):
            handler(addr)
        else:
            handler(addr, message)

    def on_disconnect(self, addr: str) -> None:
        log.info("peer %s disconnected", addr)
        if addr == self.host_addr:
            log.warning("the host has left the pool")
        self.clients.pop(addr, None)

    def on_greeting(self, addr: str, message: Greeting) -> None:
        client = self.clients[addr]
        client.read_bytes = message.read_bytes
        if message.is_host:
            self.chunks = []
            self.max_bytes = message.read_bytes
            try:
                self.request_next_chunk_segs()
            except SegmentError as exc:
                log.error("could not request chunk segments: %s", exc)
        log.info(
            "peer %s has %d chunks, host: %s",
            addr,
            client.read_bytes // DATA_CHUNK_SIZE,
            message.is_host,
        )

    def on_gimme(self, addr: str, message: Gimme) -> None:
        try:
            segment = self.has_chunk_segment(message.chunk_index, message.start, message.size)
        except SegmentError as exc:
            log.warning("missing segment: %s", exc)
            return
        self.clients[addr].peer.send(
            HereYaGo(message.chunk_index, message.start, message.size, segment)
        )

    def on_hereyago(self, addr: str, message: HereYaGo) -> None:
        try:
            self.expecting_chunk_seg(addr, message.chunk_index, message.start, message.size)
        except SegmentError as exc:
            log.warning("invalid segment response: %s", exc)
            return
        if len(message.data) < message.size:
            log.warning(
                "segment from %s is short: %d of %d bytes", addr, len(message.data), message.size
            )
            return
        data = bytes(message.data[: message.size])
        self.add_chunk_segment(message.chunk_index, message.start, data)
        self.read_bytes += len(data)

        if self.pending:
            return
        if self.read_bytes >= self.max_bytes:
            self.read_bytes = self.max_bytes
            log.info("received all chunks")
            return
        self.broadcast(NewChunk(self.read_bytes))
        try:
            self.request_next_chunk_segs()
        except SegmentError as exc:
            log.error("could not request chunk segments: %s", exc)

    def on_newchunk(self, addr: str, message: NewChunk) -> None:
        self.clients[addr].read_bytes = message.read_bytes
        log.info("peer %s now has %d bytes", addr, message.read_bytes)

    def has_chunk_segment(self, chunk_index: int, start: int, size: int) -> bytes:
        """Return the requested segment, or raise SegmentError if it is not held."""
        if chunk_index >= len(self.chunks):
            raise SegmentError(
                f"chunk_index({chunk_index}) went out of bound({len(self.chunks)})"
            )
        chunk = self.chunks[chunk_index]
        if start + size > len(chunk):
            raise SegmentError(
                f"start({start}) + size({size}) went out of bound({len(chunk)})"
            )
        return bytes(chunk[start : start + size])

    def expecting_chunk_seg(self, addr: str, chunk_index: int, start: int, size: int) -> None:
        """Check a response against the request made of addr; the request is consumed."""
        expected = self.pending.pop(addr, None)
        if expected is None:
            raise SegmentError(f"didn't expect {addr} to send a chunk segment")
        received = ChunkBounds(addr, chunk_index, start, size)
        if received != expected:
            raise SegmentError(f"expected {expected}, got {received}")

    def add_chunk_segment(self, chunk_index: int, start: int, data: bytes) -> None:
        chunk = self.chunks[chunk_index]
        if not isinstance(chunk, bytearray):
            chunk = bytearray(chunk)
            self.chunks[chunk_index] = chunk
        if start > len(chunk):
            raise SegmentError(f"start({start}) went out of bound({len(chunk)})")
        end = min(start + len(data), len(chunk))
        chunk[start:end] = data[: end - start]

    def broadcast(self, message: Any) -> None:
        for client in self.clients.values():
            client.peer.send(message)

    def request_next_chunk_segs(self) -> list[ChunkBounds]:
        """Ask every peer ahead of us for one segment of the next chunk."""
        if self.read_bytes >= self.max_bytes:
            raise SegmentError(f"received all {self.max_bytes} bytes")
        if self.pending:
            raise SegmentError(
                "must receive every expected chunk segment from connected peers to advance"
            )
        targets = [
            addr for addr, client in self.clients.items() if client.read_bytes > self.read_bytes
        ]
        if not targets:
            raise SegmentError("no connected peer holds the next chunk")

        self.chunks.append(bytearray(DATA_CHUNK_SIZE))
        chunk_size = min(DATA_CHUNK_SIZE, self.max_bytes - self.read_bytes)
        seg_size = chunk_size // len(targets)
        chunk_index = self.read_bytes // DATA_CHUNK_SIZE
        log.info("targets to read %d bytes from: %s", seg_size, targets)

        requested = []
        for position, addr in enumerate(targets):
            size = seg_size
            if position == len(targets) - 1:
                size += chunk_size - seg_size * len(targets)
            bounds = ChunkBounds(addr, chunk_index, seg_size * position, size)
            self.pending[addr] = bounds
            requested.append(bounds)
            self.clients[addr].peer.send(Gimme(bounds.chunk_index, bounds.start, bounds.size))
        return requested

    def is_complete(self) -> bool:
        return self.read_bytes >= self.max_bytes


def extract_port(addr: str) -> int:
    """Return the port of a host:port address; raise ValueError if there is none."""
    if addr.startswith("["):
        end = addr.find("]")
        if end == -1 or not addr[end + 1 :].startswith(":"):
            raise ValueError(f"missing port in address {addr!r}")
        port_str = addr[end + 2 :]
    else:
        host, sep, port_str = addr.rpartition(":")
        if not sep:
            raise ValueError(f"missing port in address {addr!r}")
        if ":" in host:
            raise ValueError(f"too many colons in address {addr!r}")
    if not (port_str.isascii() and port_str.isdigit()):
        raise ValueError(f"invalid port {port_str!r} in address {addr!r}")
    port = int(port_str)
    if port > 0xFFFF:
        raise ValueError(f"port {port} out of range")
    return port