"""
dispatch_gen - precision-dispatching wrapper generator for MKL

Parses mkl.h with pycparser, picks the routines named in a wildcard pattern
list and pairs their 32-bit and 64-bit variants under one dispatch name, then
renders a Rust trait, C++ overloads or generic Go functions around them.
"""

from .errors import (
    DispatchGenError, PatternError, HeaderParseError, DuplicateSymbolError,
    MissingPairingError, IncompatiblePairError, UnsupportedDeclarationError, FormatError,
)
from .patterns import RoutinePattern, PatternMatch, PatternList, load_patterns, parse_pattern_lines
from .types import Target, MappedType, TypeMapper, map_type, map_return_type
from .ir import ParamInfo, FuncInfo, FunctionRegistry
from .extract import DeclarationExtractor, parse_header, parse_text, scan_translation_unit
from .codegen import CodeGen
from .rust import RustGenerator
from .cc import CppGenerator
from .golang import GoGenerator
from .generator import Generator, GeneratorConfig

__all__ = [
    'DispatchGenError', 'PatternError', 'HeaderParseError', 'DuplicateSymbolError',
    'MissingPairingError', 'IncompatiblePairError', 'UnsupportedDeclarationError', 'FormatError',
    'RoutinePattern', 'PatternMatch', 'PatternList', 'load_patterns', 'parse_pattern_lines',
    'Target', 'MappedType', 'TypeMapper', 'map_type', 'map_return_type',
    'ParamInfo', 'FuncInfo', 'FunctionRegistry',
    'DeclarationExtractor', 'parse_header', 'parse_text', 'scan_translation_unit',
    'CodeGen',
    'RustGenerator', 'CppGenerator', 'GoGenerator',
    'Generator', 'GeneratorConfig',
]
