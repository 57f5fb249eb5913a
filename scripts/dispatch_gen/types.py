"""
Type mapping module

Maps C parameter and return types to their spelling in each target language.

Float and double collapse to one generic placeholder (Self in Rust, F in Go)
so that the 32-bit and 64-bit variants share a single dispatch signature.
Types outside the table are library types (CBLAS_LAYOUT, lapack_int, ...)
that the wrapper refers to rather than redefines.
"""

import re
from enum import Enum
from typing import NamedTuple, Optional


class Target(str, Enum):
    """Output language"""
    RUST = 'rs'
    CC = 'cc'
    GO = 'go'


class MappedType(NamedTuple):
    """A C type rendered for a target

    owned is False when the type comes from the raw bindings and must be
    imported (Rust) or aliased (Go); import_name is then the name to bring in.
    """
    name: str
    owned: bool
    import_name: Optional[str] = None


# Base types, keyed by their normalize_base() spelling. Pointer and array
# forms are derived from these.
RUST_SCALARS = {
    'size_t': 'usize',
    'int': 'i32',
    'int32_t': 'i32',
    'int64_t': 'i64',
    'short': 'i16',
    'long': 'std::ffi::c_long',
    'long long': 'i64',
    'unsigned int': 'u32',
    'unsigned short': 'u16',
    'unsigned long': 'std::ffi::c_ulong',
    'unsigned long long': 'u64',
    'char': 'i8',
    'signed char': 'i8',
    'unsigned char': 'u8',
    'float': 'Self',
    'double': 'Self',
    'void': 'std::ffi::c_void',
}

GO_SCALARS = {
    'size_t': 'uint64',
    'int': 'int32',
    'int32_t': 'int32',
    'int64_t': 'int64',
    'short': 'int16',
    'long': 'int64',
    'long long': 'int64',
    'unsigned int': 'uint32',
    'unsigned short': 'uint16',
    'unsigned long': 'uint64',
    'unsigned long long': 'uint64',
    'char': 'byte',
    'signed char': 'int8',
    'unsigned char': 'uint8',
    'float': 'F',
    'double': 'F',
}

# normalize_base() spelling -> cgo spelling
CGO_NAMES = {
    'short': 'short',
    'long long': 'longlong',
    'unsigned int': 'uint',
    'unsigned short': 'ushort',
    'unsigned long': 'ulong',
    'unsigned long long': 'ulonglong',
    'unsigned char': 'uchar',
    'signed char': 'schar',
}

FLOAT_BASES = ('float', 'double')

_INT_WORDS = ('signed', 'unsigned', 'short', 'long', 'int', 'char')

_TAG_RE = re.compile(r'^(?:enum|struct|union)\s+')

# [const] base [*|[]]
_SIMPLE_TYPE_RE = re.compile(r'^(const\s+)?([A-Za-z_]\w*(?:\s+[A-Za-z_]\w*)*?)\s*(\*|\[\])?$')


def split_type(c_type: str) -> Optional[tuple[bool, str, str]]:
    """Split a C type string into (is_const, base, suffix)

    Returns None for shapes beyond one const, one base and one pointer or
    array level.

    Examples:
        'const double *' -> (True, 'double', '*')
        'float[]' -> (False, 'float', '[]')
        'CBLAS_LAYOUT' -> (False, 'CBLAS_LAYOUT', '')
    """
    m = _SIMPLE_TYPE_RE.match(c_type.strip())
    if m is None:
        return None
    return m.group(1) is not None, m.group(2), m.group(3) or ''


def normalize_base(base: str) -> str:
    """Canonical spelling of a builtin integer base type

    Examples:
        long long int -> long long
        signed long -> long
        unsigned -> unsigned int
        enum CBLAS_SIDE -> enum CBLAS_SIDE
    """
    words = base.split()
    if not words or any(w not in _INT_WORDS for w in words):
        return ' '.join(words)
    unsigned = 'unsigned' in words
    if 'char' in words:
        if unsigned:
            return 'unsigned char'
        return 'signed char' if 'signed' in words else 'char'
    if 'short' in words:
        size = 'short'
    elif 'long' in words:
        size = ' '.join(['long'] * words.count('long'))
    else:
        size = 'int'
    return f'unsigned {size}' if unsigned else size


def cgo_name(base: str) -> str:
    """Name cgo gives a C base type, without the C. prefix

    Examples:
        long long int -> longlong
        enum CBLAS_SIDE -> enum_CBLAS_SIDE
    """
    base = normalize_base(base)
    return CGO_NAMES.get(base, base.replace(' ', '_'))


def strip_const(c_type: str) -> str:
    if c_type.startswith('const '):
        return c_type[len('const '):]
    return c_type


def is_pointer_type(c_type: str) -> bool:
    return c_type.endswith('*')


def is_array_type(c_type: str) -> bool:
    return c_type.endswith('[]')


def is_generic_float(c_type: str) -> bool:
    """Check if type involves the per-precision float type"""
    parts = split_type(c_type)
    return parts is not None and parts[1] in FLOAT_BASES


class TypeMapper:
    """Maps C types for one target language"""

    def __init__(self, target: Target):
        self.target = Target(target)

    def map(self, c_type: str) -> MappedType:
        """Map a parameter type"""
        if self.target == Target.CC:
            return MappedType(c_type, True)

        parts = split_type(c_type)
        if parts is None:
            # best effort for compound declarators
            name = strip_const(c_type)
            return MappedType(name, False, name)

        is_const, base, suffix = parts
        if self.target == Target.RUST:
            return self._map_rust(is_const, normalize_base(base), suffix)
        return self._map_go(normalize_base(base), suffix)

    def map_return(self, c_type: str) -> MappedType:
        """Map a return type; void maps to an empty name"""
        if c_type == 'void':
            return MappedType('', True)
        return self.map(c_type)

    def _map_rust(self, is_const: bool, base: str, suffix: str) -> MappedType:
        name = RUST_SCALARS.get(base)
        import_name = None
        if name is None:
            # bindgen names enum X / struct X plain X
            name = import_name = _TAG_RE.sub('', base)
        owned = import_name is None
        if suffix:
            mutability = 'const' if is_const else 'mut'
            name = f'*{mutability} {name}'
        return MappedType(name, owned, import_name)

    def _map_go(self, base: str, suffix: str) -> MappedType:
        if suffix and base == 'void':
            return MappedType('unsafe.Pointer', True)
        name = GO_SCALARS.get(base)
        import_name = None
        if name is None:
            name = import_name = cgo_name(base)
        owned = import_name is None
        if suffix:
            name = f'*{name}'
        return MappedType(name, owned, import_name)


def map_type(c_type: str, target: Target) -> MappedType:
    """Map a C parameter type for target"""
    return TypeMapper(target).map(c_type)


def map_return_type(c_type: str, target: Target) -> MappedType:
    """Map a C return type for target"""
    return TypeMapper(target).map_return(c_type)
