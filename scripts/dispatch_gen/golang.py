"""
Go output

Generates a cgo package with one generic function per routine:

    func LAPACKE_potrf[F Float](matrix_layout int32, uplo byte, n lapack_int, a *F, lda lapack_int) lapack_int {
        var zero F
        switch any(zero).(type) {
        case float32:
            return lapack_int(C.LAPACKE_spotrf(C.int(matrix_layout), ...))
        default:
            return lapack_int(C.LAPACKE_dpotrf(C.int(matrix_layout), ...))
        }
    }
"""

import shutil
import subprocess
import sys
from typing import TYPE_CHECKING

from .codegen import CodeGen, go_exported_name, go_ident, pattern_comment_lines
from .errors import FormatError
from .types import Target, TypeMapper, cgo_name, split_type

if TYPE_CHECKING:
    from .ir import FuncInfo, FunctionRegistry


def cgo_type(base: str) -> str:
    """cgo name of a C base type

    Examples:
        float -> C.float
        long long int -> C.longlong
        enum CBLAS_SIDE -> C.enum_CBLAS_SIDE
    """
    return 'C.' + cgo_name(base)


def cgo_arg(c_type: str, var: str) -> str:
    """Convert a Go argument to the C parameter type"""
    parts = split_type(c_type)
    if parts is None:
        return var
    _, base, suffix = parts
    if suffix:
        if base == 'void':
            return var
        return f'(*{cgo_type(base)})(unsafe.Pointer({var}))'
    return f'{cgo_type(base)}({var})'


class GoGenerator:
    """Generates a generic cgo wrapper package"""

    def __init__(self, package: str = 'mklroutines', header_name: str = 'mkl.h'):
        self.package = package
        self.header_name = header_name
        self.types = TypeMapper(Target.GO)

    def generate(self, registry: 'FunctionRegistry', patterns: list[str], gen: CodeGen):
        pairs = list(registry.pairs())
        body = CodeGen(indent_str='\t')
        uses_unsafe = False
        for f32, f64 in pairs:
            uses_unsafe |= self._gen_func(f32, f64, body)

        gen.line('// Code generated by gen-mkl-wrapper. DO NOT EDIT.')
        gen.line()
        gen.comment_block('//', pattern_comment_lines(
            f'Package {self.package} dispatches MKL routines on float32/float64.', patterns))
        gen.line(f'package {self.package}')
        gen.line()
        gen.line('/*')
        gen.line(f'#include <{self.header_name}>')
        gen.line('*/')
        gen.line('import "C"')
        gen.line()
        if uses_unsafe:
            gen.line('import "unsafe"')
            gen.line()

        aliases = self.type_aliases(registry)
        for name in aliases:
            gen.line(f'type {name} = C.{name}')
        if aliases:
            gen.line()

        gen.line('// Float is the set of precisions every routine is available in.')
        with gen.block('type Float interface {'):
            gen.line('float32 | float64')
        gen.line()
        gen.lines(*body.output().rstrip('\n').split('\n'))

    def _gen_func(self, f32: 'FuncInfo', f64: 'FuncInfo', gen: CodeGen) -> bool:
        """Generate one generic function; return True if it needs unsafe"""
        names = [go_ident(p.name) for p in f32.params]
        params = ', '.join(
            f'{n} {self.types.map(p.type).name}' for n, p in zip(names, f32.params))
        ret = self.types.map_return(f32.return_type).name
        zero = 'zero'
        while zero in names:
            zero += '_'

        uses_unsafe = 'unsafe.' in params or 'unsafe.' in ret
        header = f'func {go_exported_name(f32.dispatch_name)}[F Float]({params})'
        if ret:
            header += f' {ret}'
        with gen.block(header + ' {'):
            gen.line(f'var {zero} F')
            gen.line(f'switch any({zero}).(type) {{')
            for label, func in (('case float32:', f32), ('default:', f64)):
                gen.line(label)
                gen.indent()
                call, needs_unsafe = self._call(func, names, ret)
                uses_unsafe |= needs_unsafe
                gen.line(call)
                gen.dedent()
            gen.line('}')
        gen.line()
        return uses_unsafe

    def _call(self, func: 'FuncInfo', names: list[str], ret: str) -> tuple[str, bool]:
        args = [cgo_arg(p.type, n) for n, p in zip(names, func.params)]
        call = f'C.{func.raw_name}({", ".join(args)})'
        uses_unsafe = any('unsafe.Pointer' in a for a in args)
        if not ret:
            return call, uses_unsafe
        if ret.startswith('*'):
            return f'return ({ret})(unsafe.Pointer({call}))', True
        return f'return {ret}({call})', uses_unsafe

    def type_aliases(self, registry: 'FunctionRegistry') -> list[str]:
        """Library types used by the wrappers, aliased from cgo"""
        names = set()
        for func in registry.single_precision() + registry.double_precision():
            mapped = [self.types.map(p.type) for p in func.params]
            mapped.append(self.types.map_return(func.return_type))
            names.update(m.import_name for m in mapped if not m.owned)
        return sorted(names)


def format_go_source(text: str, gofmt: str = 'gofmt') -> str:
    """Run gofmt over generated code; keep the text as is if gofmt is absent"""
    exe = shutil.which(gofmt)
    if exe is None:
        print(f'  >> warning: {gofmt} not found, Go output left unformatted', file=sys.stderr)
        return text
    result = subprocess.run([exe], input=text, capture_output=True, text=True)
    if result.returncode != 0:
        raise FormatError(f'gofmt rejected generated code: {result.stderr.strip()}')
    return result.stdout
