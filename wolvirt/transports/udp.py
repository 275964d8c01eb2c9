"""UDP listener for Wake-on-LAN datagrams using Python sockets."""

from __future__ import annotations

import socket

from wolvirt.core.errors import AddressParseError, SocketBindError, UdpReceiveError

# 102-byte magic packet plus a 6-byte SecureOn password
WOL_BUFFER_SIZE = 108


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` (or ``[v6-host]:port``) into its parts."""
    host, sep, port_text = address.strip().rpartition(":")
    if not sep or not host:
        raise AddressParseError(f"Invalid listen address '{address}': expected host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        raise AddressParseError(
            f"Invalid listen address '{address}': IPv6 hosts must be bracketed"
        )
    try:
        port = int(port_text)
    except ValueError as exc:
        raise AddressParseError(f"Invalid port in listen address '{address}'") from exc
    if not 0 <= port <= 65535:
        raise AddressParseError(f"Port out of range in listen address '{address}'")
    return host, port


class UDPListener:
    def __init__(self, address: str, *, buffer_size: int = WOL_BUFFER_SIZE) -> None:
        self.host, self.port = parse_listen_address(address)
        self.buffer_size = buffer_size
        self._socket: socket.socket | None = None

    @property
    def bound_address(self) -> tuple[str, int]:
        if self._socket is None:
            raise UdpReceiveError("Listener is not bound")
        return self._socket.getsockname()[:2]

    def bind(self) -> UDPListener:
        family = socket.AF_INET6 if ":" in self.host else socket.AF_INET
        try:
            udp_socket = socket.socket(family, socket.SOCK_DGRAM)
        except OSError as exc:
            raise SocketBindError(f"Could not create UDP socket: {exc}") from exc
        try:
            udp_socket.bind((self.host, self.port))
        except OSError as exc:
            udp_socket.close()
            raise SocketBindError(
                f"Socket bind error on {self.host}:{self.port}: {exc}"
            ) from exc
        self._socket = udp_socket
        return self

    def receive(self) -> tuple[bytes, tuple[str, int]]:
        if self._socket is None:
            raise UdpReceiveError("Listener is not bound")
        try:
            data, addr = self._socket.recvfrom(self.buffer_size)
        except OSError as exc:
            raise UdpReceiveError(f"UDP receive error: {exc}") from exc
        return data, addr[:2]

    def close(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def __enter__(self) -> UDPListener:
        if self._socket is None:
            self.bind()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
