"""
IR (Intermediate Representation) module

Function descriptors extracted from the MKL header, and the registry that
pairs their 32-bit and 64-bit variants under one dispatch name.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from .errors import DuplicateSymbolError, MissingPairingError, IncompatiblePairError
from .types import is_array_type, is_pointer_type


@dataclass(frozen=True)
class ParamInfo:
    """Function parameter information"""
    name: str
    type: str

    @property
    def shape(self) -> str:
        """'array', 'pointer' or 'scalar'"""
        if is_array_type(self.type):
            return 'array'
        if is_pointer_type(self.type):
            return 'pointer'
        return 'scalar'

    @property
    def base_type(self) -> str:
        """Type without its array suffix"""
        if is_array_type(self.type):
            return self.type[:-2]
        return self.type


@dataclass(frozen=True)
class FuncInfo:
    """Function declaration information"""
    raw_name: str
    dispatch_name: str
    is_single: bool
    return_type: str
    params: tuple[ParamInfo, ...]

    @property
    def precision(self) -> str:
        return 'f32' if self.is_single else 'f64'

    @property
    def shapes(self) -> tuple[str, ...]:
        return tuple(p.shape for p in self.params)

    @property
    def param_names(self) -> list[str]:
        return [p.name for p in self.params]


class FuncPair:
    """Slot holding the 32-bit and 64-bit variant of one dispatch name"""

    def __init__(self, dispatch_name: str):
        self.dispatch_name = dispatch_name
        self.f32: Optional[FuncInfo] = None
        self.f64: Optional[FuncInfo] = None

    @property
    def complete(self) -> bool:
        return self.f32 is not None and self.f64 is not None


class FunctionRegistry:
    """Descriptors of one translation unit, keyed by dispatch name

    Dispatch names iterate in the order they first appeared in the header.
    """

    def __init__(self):
        self._pairs: dict[str, FuncPair] = {}

    def add(self, func: FuncInfo):
        """Insert a descriptor into its precision slot

        Redeclaring an identical prototype is a no-op; a different
        declaration for an occupied slot raises DuplicateSymbolError.
        """
        pair = self._pairs.get(func.dispatch_name)
        if pair is None:
            pair = FuncPair(func.dispatch_name)
            self._pairs[func.dispatch_name] = pair

        current = pair.f32 if func.is_single else pair.f64
        if current is not None:
            if current == func:
                return
            raise DuplicateSymbolError(
                f'{func.raw_name} matched {func.dispatch_name} ({func.precision}) '
                f'but the slot already holds {current.raw_name}')

        if func.is_single:
            pair.f32 = func
        else:
            pair.f64 = func

    def dispatch_names(self) -> list[str]:
        return list(self._pairs)

    def pair_for(self, dispatch_name: str) -> tuple[FuncInfo, FuncInfo]:
        """Return (f32, f64) descriptors, failing if either is missing"""
        pair = self._pairs.get(dispatch_name)
        if pair is None:
            raise MissingPairingError(f'{dispatch_name}: no routine matched')
        if pair.f32 is None:
            raise MissingPairingError(f'{dispatch_name}: 32-bit variant missing (only {pair.f64.raw_name})')
        if pair.f64 is None:
            raise MissingPairingError(f'{dispatch_name}: 64-bit variant missing (only {pair.f32.raw_name})')
        return pair.f32, pair.f64

    def pairs(self) -> Iterator[tuple[FuncInfo, FuncInfo]]:
        for name in self._pairs:
            yield self.pair_for(name)

    def single_precision(self) -> list[FuncInfo]:
        return [p.f32 for p in self._pairs.values() if p.f32 is not None]

    def double_precision(self) -> list[FuncInfo]:
        return [p.f64 for p in self._pairs.values() if p.f64 is not None]

    def validate(self):
        """Check every dispatch name has two compatible variants"""
        for name in self._pairs:
            f32, f64 = self.pair_for(name)
            if len(f32.params) != len(f64.params):
                raise IncompatiblePairError(
                    f'{name}: {f32.raw_name} takes {len(f32.params)} parameters '
                    f'but {f64.raw_name} takes {len(f64.params)}')
            for i, (a, b) in enumerate(zip(f32.params, f64.params)):
                if a.shape != b.shape:
                    raise IncompatiblePairError(
                        f'{name}: parameter {i} is {a.shape} in {f32.raw_name} '
                        f'but {b.shape} in {f64.raw_name}')

    def __contains__(self, dispatch_name: str) -> bool:
        return dispatch_name in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)
