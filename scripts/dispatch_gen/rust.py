"""
Rust output

Generates a trait implemented for f32 and f64:

    pub trait MKLRoutines {
        fn LAPACKE_potrf(matrix_layout: i32, uplo: i8, n: i32, a: *mut Self, lda: i32) -> i32;
    }

    impl MKLRoutines for f64 {
        fn LAPACKE_potrf(matrix_layout: i32, uplo: i8, n: i32, a: *mut Self, lda: i32) -> i32 {
            unsafe { LAPACKE_dpotrf(matrix_layout, uplo, n, a, lda) }
        }
    }
"""

from typing import TYPE_CHECKING

from .codegen import CodeGen, pattern_comment_lines, rust_ident
from .types import Target, TypeMapper

if TYPE_CHECKING:
    from .ir import FuncInfo, FunctionRegistry


class RustGenerator:
    """Generates the dispatch trait and its f32/f64 impls"""

    def __init__(self, provider_crate: str = 'crate', trait_name: str = 'MKLRoutines'):
        self.provider_crate = provider_crate
        self.trait_name = trait_name
        self.types = TypeMapper(Target.RUST)

    def generate(self, registry: 'FunctionRegistry', patterns: list[str], gen: CodeGen):
        pairs = list(registry.pairs())

        gen.comment_block('//', pattern_comment_lines(
            'Generated by gen-mkl-wrapper, do not edit.', patterns))
        gen.line()
        gen.line('#![allow(non_snake_case)]')
        gen.line()
        gen.line(self.use_line(registry))
        gen.line()

        with gen.block(f'pub trait {self.trait_name} {{'):
            for f32, _ in pairs:
                gen.line(f'{self.signature(f32)};')
        gen.line()

        for float_type, pick in (('f64', 1), ('f32', 0)):
            with gen.block(f'impl {self.trait_name} for {float_type} {{'):
                for i, pair in enumerate(pairs):
                    if i:
                        gen.line()
                    self._gen_method(pair[0], pair[pick], gen)
            gen.line()

    def _gen_method(self, decl: 'FuncInfo', func: 'FuncInfo', gen: CodeGen):
        """Trait method forwarding to the precision-specific symbol"""
        args = ', '.join(rust_ident(p.name) for p in decl.params)
        gen.line(f'// for {func.precision}')
        with gen.block(f'{self.signature(decl)} {{'):
            gen.line(f'unsafe {{ {func.raw_name}({args}) }}')

    def signature(self, func: 'FuncInfo') -> str:
        params = ', '.join(
            f'{rust_ident(p.name)}: {self.types.map(p.type).name}' for p in func.params)
        ret = self.types.map_return(func.return_type).name
        sig = f'fn {func.dispatch_name}({params})'
        if ret:
            sig += f' -> {ret}'
        return sig

    def use_line(self, registry: 'FunctionRegistry') -> str:
        """Import raw symbols and library types from the provider crate"""
        uses = set()
        for func in registry.single_precision() + registry.double_precision():
            uses.add(func.raw_name)
            mapped = [self.types.map(p.type) for p in func.params]
            mapped.append(self.types.map_return(func.return_type))
            for m in mapped:
                if not m.owned:
                    uses.add(m.import_name)
        return f'use {self.provider_crate}::{{{", ".join(sorted(uses))}}};'
