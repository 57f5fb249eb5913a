"""
Code generation utilities

Line buffer with indentation support, and identifier helpers shared by the
target generators.
"""

RUST_KEYWORDS = {
    'as', 'break', 'const', 'continue', 'crate', 'else', 'enum', 'extern',
    'false', 'fn', 'for', 'if', 'impl', 'in', 'let', 'loop', 'match', 'mod',
    'move', 'mut', 'pub', 'ref', 'return', 'self', 'Self', 'static', 'struct',
    'super', 'trait', 'true', 'type', 'unsafe', 'use', 'where', 'while',
    'async', 'await', 'dyn', 'abstract', 'become', 'box', 'do', 'final',
    'macro', 'override', 'priv', 'typeof', 'unsized', 'virtual', 'yield', 'try',
}

GO_KEYWORDS = {
    'break', 'case', 'chan', 'const', 'continue', 'default', 'defer', 'else',
    'fallthrough', 'for', 'func', 'go', 'goto', 'if', 'import', 'interface',
    'map', 'package', 'range', 'return', 'select', 'struct', 'switch', 'type',
    'var',
}

# cgo pseudo-package, type parameter, imported package and builtin
GO_RESERVED_NAMES = {'C', 'F', 'unsafe', 'any'}


class CodeGen:
    """Code generation helper with indentation support"""

    def __init__(self, indent_str: str = '    '):
        self._lines: list[str] = []
        self._indent: int = 0
        self._indent_str: str = indent_str

    def line(self, text: str = ''):
        """Add a line with current indentation"""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append('')

    def lines(self, *texts: str):
        """Add multiple lines"""
        for text in texts:
            self.line(text)

    def comment_block(self, prefix: str, texts):
        """Add each text as a line comment"""
        for text in texts:
            self.line(f'{prefix} {text}' if text else prefix)

    def indent(self):
        """Increase indentation"""
        self._indent += 1

    def dedent(self):
        """Decrease indentation"""
        if self._indent > 0:
            self._indent -= 1

    def block(self, header: str, footer: str = '}'):
        """Context manager for code blocks"""
        return _BlockContext(self, header, footer)

    def output(self) -> str:
        """Get generated code as string, newline terminated"""
        return '\n'.join(self._lines) + '\n'


class _BlockContext:
    """Context manager for indented code blocks"""

    def __init__(self, gen: CodeGen, header: str, footer: str):
        self._gen = gen
        self._header = header
        self._footer = footer

    def __enter__(self):
        self._gen.line(self._header)
        self._gen.indent()
        return self

    def __exit__(self, *args):
        self._gen.dedent()
        self._gen.line(self._footer)


def go_exported_name(name: str) -> str:
    """Capitalize the first letter so Go exports the identifier

    Examples:
        cblas_gemm -> Cblas_gemm
        LAPACKE_potrf -> LAPACKE_potrf
    """
    if name and 'a' <= name[0] <= 'z':
        return name[0].upper() + name[1:]
    return name


def rust_ident(name: str) -> str:
    """Escape Rust keywords as raw identifiers"""
    if name in ('self', 'Self', 'super', 'crate'):
        return name + '_'
    if name in RUST_KEYWORDS:
        return f'r#{name}'
    return name


def go_ident(name: str) -> str:
    """Append an underscore to Go keywords and names the wrappers use"""
    if name in GO_KEYWORDS or name in GO_RESERVED_NAMES:
        return name + '_'
    return name


def pattern_comment_lines(title: str, patterns: list[str]) -> list[str]:
    """Header comment body listing the desired routine patterns"""
    lines = [title, '', 'Routines:']
    lines += [f'  {p}' for p in patterns]
    return lines
