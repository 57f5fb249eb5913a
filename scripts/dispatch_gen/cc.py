"""
C++ output

Generates overloaded inline functions, one per precision, keeping the C
parameter types of each raw symbol.
"""

from typing import TYPE_CHECKING

from .codegen import CodeGen, pattern_comment_lines
from .types import is_array_type

if TYPE_CHECKING:
    from .ir import FuncInfo, FunctionRegistry


class CppGenerator:
    """Generates a header of precision overloads"""

    def __init__(self, header_name: str = 'mkl.h'):
        self.header_name = header_name

    def generate(self, registry: 'FunctionRegistry', patterns: list[str], gen: CodeGen):
        gen.comment_block('//', pattern_comment_lines(
            'Generated by gen-mkl-wrapper, do not edit.', patterns))
        gen.line()
        gen.line('#pragma once')
        gen.line()
        gen.line(f'#include <{self.header_name}>')
        gen.line()

        for f32, f64 in registry.pairs():
            self._gen_overload(f32, gen)
            self._gen_overload(f64, gen)

    def _gen_overload(self, func: 'FuncInfo', gen: CodeGen):
        call = f'{func.raw_name}({", ".join(func.param_names)})'
        with gen.block(f'inline {func.return_type} {func.dispatch_name}({self.params(func)}) {{'):
            if func.return_type == 'void':
                gen.line(f'{call};')
            else:
                gen.line(f'return {call};')
        gen.line()

    @staticmethod
    def params(func: 'FuncInfo') -> str:
        ps = []
        for p in func.params:
            if is_array_type(p.type):
                ps.append(f'{p.base_type} {p.name}[]')
            else:
                ps.append(f'{p.type} {p.name}')
        return ', '.join(ps)
