"""
Main generator module

Orchestrates header parsing, declaration scanning and target rendering.
"""

import os
import sys
from dataclasses import dataclass, field

from .cc import CppGenerator
from .codegen import CodeGen
from .extract import parse_header, scan_translation_unit
from .golang import GoGenerator, format_go_source
from .ir import FunctionRegistry
from .patterns import PatternList
from .rust import RustGenerator
from .types import Target

DEFAULT_MKLROOT = '/opt/intel/oneapi/mkl/latest'


def default_header_path() -> str:
    """mkl.h under $MKLROOT"""
    mkl_root = os.environ.get('MKLROOT') or DEFAULT_MKLROOT
    return os.path.join(mkl_root, 'include', 'mkl.h')


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one generation run"""
    target: Target = Target.RUST
    header_path: str = field(default_factory=default_header_path)
    include_dirs: tuple[str, ...] = ()
    use_cpp: bool = True
    cpp_path: str = 'cpp'
    provider_crate: str = 'crate'
    trait_name: str = 'MKLRoutines'
    go_package: str = 'mklroutines'
    format_output: bool = True
    quiet: bool = False

    @property
    def header_name(self) -> str:
        """Name used in generated #include lines"""
        if self.header_path == '-':
            return 'mkl.h'
        return os.path.basename(self.header_path)

    @property
    def all_include_dirs(self) -> list[str]:
        """Header directory first, then extra include directories"""
        dirs = []
        if self.header_path != '-':
            dirs.append(os.path.dirname(os.path.abspath(self.header_path)))
        dirs += [d for d in self.include_dirs if d not in dirs]
        return dirs


class Generator:
    """Main wrapper generator"""

    def __init__(self, config: GeneratorConfig, patterns: PatternList):
        self.config = config
        self.patterns = patterns

    def log(self, message: str):
        if not self.config.quiet:
            print(message, file=sys.stderr)

    def scan(self) -> FunctionRegistry:
        """Parse the header and collect matching routines"""
        cfg = self.config
        self.log(f'  parsing {cfg.header_path}')
        ast = parse_header(cfg.header_path, cfg.all_include_dirs,
                           use_cpp=cfg.use_cpp, cpp_path=cfg.cpp_path)
        return scan_translation_unit(ast, self.patterns, quiet=cfg.quiet)

    def run(self) -> str:
        """Generate wrapper source for the configured target"""
        self.log(f'=== Generating {self.config.target.name} wrappers:')
        registry = self.scan()
        return self.render(registry)

    def render(self, registry: FunctionRegistry) -> str:
        """Render a scanned registry; fails if any routine is unpaired"""
        cfg = self.config
        registry.validate()

        if cfg.target == Target.CC:
            gen = CodeGen()
            CppGenerator(cfg.header_name).generate(registry, self.patterns.texts, gen)
            return gen.output()

        if cfg.target == Target.GO:
            gen = CodeGen(indent_str='\t')
            GoGenerator(cfg.go_package, cfg.header_name).generate(registry, self.patterns.texts, gen)
            text = gen.output()
            if cfg.format_output:
                text = format_go_source(text)
            return text

        gen = CodeGen()
        RustGenerator(cfg.provider_crate, cfg.trait_name).generate(registry, self.patterns.texts, gen)
        return gen.output()


def write_output(text: str, path: str):
    """Write generated code to path, or stdout for '-'"""
    if path == '-':
        sys.stdout.write(text)
        return
    with open(path, 'w', newline='\n') as f:
        f.write(text)
