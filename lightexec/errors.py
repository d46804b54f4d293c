"""Errors raised by the execution layer and the EVM."""

from __future__ import annotations


def _show(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


class _Detailed(Exception):
    """An error whose message is built from named fields and a template."""

    template = ""
    fields: tuple[str, ...] = ()

    def __init__(self, *args, **kwargs):
        if not self.template:
            super().__init__(*args, **kwargs)
            return
        values = list(args) + [kwargs.pop(name) for name in self.fields[len(args):] if name in kwargs]
        if kwargs or len(values) != len(self.fields):
            raise TypeError(f"{type(self).__name__} takes fields {self.fields}")
        for name, value in zip(self.fields, values):
            setattr(self, name, value)
        super().__init__(self.template.format(*map(_show, values)))


class ExecutionError(_Detailed):
    """Base class for failures while verifying execution-layer data."""


class InvalidAccountProof(ExecutionError):
    template = "invalid account proof for address: {}"
    fields = ("address",)


class InvalidStorageProof(ExecutionError):
    template = "invalid storage proof for address: {}, slot: {}"
    fields = ("address", "slot")


class CodeHashMismatch(ExecutionError):
    template = "code hash mismatch for address: {}, found: {}, expected: {}"
    fields = ("address", "found", "expected")


class ReceiptRootMismatch(ExecutionError):
    template = "receipt root mismatch for tx: {}"
    fields = ("tx",)


class MissingTransaction(ExecutionError):
    template = "missing transaction for tx: {}"
    fields = ("tx",)


class NoReceiptForTransaction(ExecutionError):
    template = "could not prove receipt for tx: {}"
    fields = ("tx",)


class MissingLog(ExecutionError):
    template = "missing log for transaction: {}, index: {}"
    fields = ("tx", "index")


class TooManyLogsToProve(ExecutionError):
    template = "too many logs to prove: {}, current limit is: {}"
    fields = ("count", "limit")


class IncorrectRpcNetwork(ExecutionError):
    def __init__(self):
        super().__init__("execution rpc is for the incorect network")


class InvalidBaseGasFee(ExecutionError):
    template = "Invalid base gas fee helios {} vs rpc endpoint {} at block {}"
    fields = ("helios_fee", "rpc_fee", "block")


class InvalidGasUsedRatio(ExecutionError):
    template = "Invalid gas used ratio of helios {} vs rpc endpoint {} at block {}"
    fields = ("helios_ratio", "rpc_ratio", "block")


class BlockNotFoundError(ExecutionError):
    template = "Block {} not found"
    fields = ("block",)


class EmptyExecutionPayload(ExecutionError):
    def __init__(self):
        super().__init__("Helios Execution Payload is empty")


class InvalidBlockRange(ExecutionError):
    template = "User query for block {} but helios oldest block is {}"
    fields = ("requested", "oldest")


class EvmError(Exception):
    """Base class for failures during an EVM call."""


class Revert(EvmError):
    def __init__(self, data=None):
        self.data = None if data is None else bytes(data)
        detail = "no data" if self.data is None else "0x" + self.data.hex()
        super().__init__(f"execution reverted: {detail}")

    @property
    def reason(self) -> str | None:
        """The decoded revert message, if the output carries one."""
        return None if self.data is None else decode_revert_reason(self.data)


class GenericEvmError(EvmError):
    def __init__(self, message):
        self.message = message
        super().__init__(f"evm error: {message}")


class RpcError(EvmError):
    def __init__(self, error, method=None):
        self.error = error
        self.method = method
        prefix = f"{method} rpc error" if method else "rpc error"
        super().__init__(f"{prefix}: {error}")


def decode_revert_reason(data) -> str | None:
    """Decode an ABI-encoded string following a 4-byte selector."""
    payload = bytes(data)[4:]
    if len(data) < 4 or len(payload) < 32:
        return None
    offset = int.from_bytes(payload[:32], "big")
    start = offset + 32
    if start > len(payload):
        return None
    length = int.from_bytes(payload[offset:start], "big")
    if start + length > len(payload):
        return None
    try:
        return payload[start : start + length].decode("utf-8")
    except UnicodeDecodeError:
        return None