"""
Declaration extraction module

Parses the MKL header with pycparser and turns matching function prototypes
into FuncInfo descriptors.
"""

import os
import subprocess
import sys
import tempfile
from typing import Optional, Sequence

from pycparser import c_ast, c_parser, preprocess_file

from .errors import HeaderParseError, UnsupportedDeclarationError
from .ir import FuncInfo, FunctionRegistry, ParamInfo
from .patterns import PatternList

# GNU/MSVC extensions pycparser does not understand
CPP_DEFINES = [
    '-D__attribute__(x)=',
    '-D__extension__=',
    '-D__restrict=',
    '-D__restrict__=',
    '-D__inline=',
    '-D__inline__=',
    '-D__asm__(x)=',
    '-D__asm(x)=',
    '-D__declspec(x)=',
    '-D__cdecl=',
    '-D__THROW=',
    '-D__builtin_va_list=void *',
]


def parse_header(path: str, include_dirs: Sequence[str] = (), use_cpp: bool = True,
                 cpp_path: str = 'cpp', cpp_args: Sequence[str] = ()) -> c_ast.FileAST:
    """Preprocess and parse a C header

    path may be '-' to read the header from stdin.
    """
    if path == '-':
        text = sys.stdin.read()
        if not use_cpp:
            return parse_text(text, '<stdin>')
        with tempfile.NamedTemporaryFile('w', suffix='.h', delete=False) as f:
            f.write(text)
            tmp_path = f.name
        try:
            return _parse_file(tmp_path, include_dirs, cpp_path, cpp_args, '<stdin>')
        finally:
            os.remove(tmp_path)

    if not use_cpp:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            raise HeaderParseError(f'cannot read header {path}: {e.strerror}') from e
        return parse_text(text, path)

    return _parse_file(path, include_dirs, cpp_path, cpp_args, path)


def _parse_file(path: str, include_dirs: Sequence[str], cpp_path: str,
                cpp_args: Sequence[str], display_name: str) -> c_ast.FileAST:
    if not os.path.exists(path):
        raise HeaderParseError(f'header not found: {path}')
    args = list(CPP_DEFINES)
    args += [f'-I{d}' for d in include_dirs]
    args += list(cpp_args)
    try:
        text = preprocess_file(path, cpp_path=cpp_path, cpp_args=args)
    except (RuntimeError, subprocess.CalledProcessError) as e:
        raise HeaderParseError(f'preprocessing {display_name} failed: {e}') from e
    return parse_text(text, display_name)


def parse_text(text: str, filename: str = '<header>') -> c_ast.FileAST:
    """Parse preprocessed C text"""
    parser = c_parser.CParser()
    try:
        return parser.parse(text, filename)
    except c_parser.ParseError as e:
        raise HeaderParseError(f'{e}') from e


def specifier_string(node: c_ast.TypeDecl) -> str:
    """Qualifiers and type specifiers of a declaration, in source order

    Examples:
        const int x -> 'const int'
        unsigned long n -> 'unsigned long'
        enum CBLAS_SIDE s -> 'enum CBLAS_SIDE'
    """
    spec = node.type
    if isinstance(spec, c_ast.IdentifierType):
        base = ' '.join(spec.names)
    elif isinstance(spec, c_ast.Struct):
        base = f'struct {spec.name}'
    elif isinstance(spec, c_ast.Union):
        base = f'union {spec.name}'
    elif isinstance(spec, c_ast.Enum):
        base = f'enum {spec.name}'
    else:
        base = type(spec).__name__
    return ' '.join(list(node.quals) + [base])


class DeclaratorVisitor(c_ast.NodeVisitor):
    """Renders a declarator subtree as (name, type string)

    Only a base type with one optional pointer or array level is expected;
    deeper pointers degrade to a best-effort spelling, anything else is
    unsupported.
    """

    def __init__(self, func_name: str):
        self.func_name = func_name

    def visit_TypeDecl(self, node):
        return node.declname, specifier_string(node)

    def visit_PtrDecl(self, node):
        if isinstance(node.type, c_ast.FuncDecl):
            raise UnsupportedDeclarationError(self.func_name, 'function pointer parameter')
        name, type_str = self.visit(node.type)
        if type_str.endswith('*'):
            return name, type_str + '*'
        return name, type_str + ' *'

    def visit_ArrayDecl(self, node):
        name, type_str = self.visit(node.type)
        return name, type_str + '[]'

    def generic_visit(self, node):
        raise UnsupportedDeclarationError(
            self.func_name, f'unsupported declarator {type(node).__name__}')


def _is_void_param(param) -> bool:
    """f(void) declares no parameters"""
    if not isinstance(param, c_ast.Typename) or param.name:
        return False
    t = param.type
    return (isinstance(t, c_ast.TypeDecl)
            and isinstance(t.type, c_ast.IdentifierType)
            and t.type.names == ['void']
            and not t.quals)


class DeclarationExtractor:
    """Extracts FuncInfo from external declarations matching the pattern list"""

    def __init__(self, patterns: PatternList):
        self.patterns = patterns

    def extract(self, node: c_ast.Node) -> Optional[FuncInfo]:
        """Return a descriptor, or None when the declaration is not wanted"""
        if not isinstance(node, c_ast.Decl) or not node.name:
            return None
        func_decl = node.type
        if not isinstance(func_decl, c_ast.FuncDecl) or func_decl.args is None:
            return None

        name = node.name
        match = self.patterns.match(name)
        if match is None:
            return None

        visitor = DeclaratorVisitor(name)
        _, return_type = visitor.visit(func_decl.type)

        return FuncInfo(
            raw_name=name,
            dispatch_name=match.dispatch_name,
            is_single=match.is_single,
            return_type=return_type,
            params=self._extract_params(name, func_decl.args, visitor),
        )

    def _extract_params(self, func_name: str, param_list: c_ast.ParamList,
                        visitor: DeclaratorVisitor) -> tuple[ParamInfo, ...]:
        params = param_list.params
        if len(params) == 1 and _is_void_param(params[0]):
            return ()

        entries = []
        for param in params:
            if isinstance(param, c_ast.EllipsisParam):
                raise UnsupportedDeclarationError(func_name, 'variadic parameter list')
            if not isinstance(param, (c_ast.Decl, c_ast.Typename)):
                raise UnsupportedDeclarationError(
                    func_name, f'unsupported parameter {type(param).__name__}')
            entries.append(visitor.visit(param.type))

        # synthesized names must not shadow real ones
        taken = {name for name, _ in entries if name}
        result = []
        for i, (name, type_str) in enumerate(entries):
            if not name:
                name = f'p{i}'
                while name in taken:
                    name += '_'
                taken.add(name)
            result.append(ParamInfo(name, type_str))
        return tuple(result)


def scan_translation_unit(ast: c_ast.FileAST, patterns: PatternList,
                          quiet: bool = False) -> FunctionRegistry:
    """Collect every matching declaration of a translation unit"""
    extractor = DeclarationExtractor(patterns)
    registry = FunctionRegistry()
    for ext in ast.ext:
        try:
            func = extractor.extract(ext)
        except UnsupportedDeclarationError as e:
            print(f'  >> warning: skipping {e}', file=sys.stderr)
            continue
        if func is not None:
            registry.add(func)
    if not quiet:
        print(f'  matched {len(registry)} routines', file=sys.stderr)
    return registry
