"""
Command line interface

Usage:
    gen-mkl-wrapper -i funcs.txt -o mkl.rs
    gen-mkl-wrapper -i funcs.txt -o mkl.h --for-cc
    gen-mkl-wrapper -i - -o mkl.go --for-go --gopkg mkl <<EOF
    cblas_*gemm
    LAPACKE_*potrf
    EOF
"""

import argparse
import sys
from typing import Optional, Sequence

from .errors import DispatchGenError
from .generator import Generator, GeneratorConfig, default_header_path, write_output
from .patterns import load_patterns
from .types import Target

DESCRIPTION = '''generate select mkl bindings for rust, c++, or go.

Each line of the input names a routine with its precision marker replaced by
a wildcard: * for s/d, # for S/D. Use - for stdin, for example

  printf 'cblas_*gemm\\nLAPACKE_*potrs\\nv*Mul\\n' | gen-mkl-wrapper -i - -o mkl.rs
'''

CRATE_HELP = ('crate/module that provides the C bindings for MKL functions, '
              'e.g. "crate::mkl_c" if the bindgen-ed mkl.h lives in mod mkl_c')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gen-mkl-wrapper',
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-i', '--input', required=True,
                        help='list of functions to generate. use * for s/d, use # for S/D. use - for stdin.')
    parser.add_argument('-o', '--output', required=True,
                        help='output file, - for stdout')
    parser.add_argument('-m', '--mkl-header', default=None,
                        help=f'path to mkl.h file (default: {default_header_path()})')
    parser.add_argument('-I', '--include-dir', action='append', default=[],
                        help='additional include directory for the preprocessor')
    parser.add_argument('-c', '--mkl-provider-crate', default='crate', help=CRATE_HELP)
    parser.add_argument('-t', '--trait-name', default='MKLRoutines', help='trait name')

    target = parser.add_mutually_exclusive_group()
    target.add_argument('--for-cc', action='store_true', help='output c++')
    target.add_argument('--for-go', action='store_true', help='output go')
    parser.add_argument('--gopkg', default='mklroutines', help='go package name')

    parser.add_argument('--cpp', default='cpp', help='C preprocessor executable')
    parser.add_argument('--no-cpp', action='store_true',
                        help='parse the header as is, without preprocessing')
    parser.add_argument('--no-format', action='store_true', help='do not run gofmt on go output')
    parser.add_argument('-q', '--quiet', action='store_true', help='suppress progress messages')
    return parser


def config_from_args(args: argparse.Namespace) -> GeneratorConfig:
    if args.for_cc:
        target = Target.CC
    elif args.for_go:
        target = Target.GO
    else:
        target = Target.RUST
    return GeneratorConfig(
        target=target,
        header_path=args.mkl_header or default_header_path(),
        include_dirs=tuple(args.include_dir),
        use_cpp=not args.no_cpp,
        cpp_path=args.cpp,
        provider_crate=args.mkl_provider_crate,
        trait_name=args.trait_name,
        go_package=args.gopkg,
        format_output=not args.no_format,
        quiet=args.quiet,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = config_from_args(args)

    if args.input == '-' and config.header_path == '-':
        parser.error('the pattern list and the header cannot both be read from stdin')

    try:
        patterns = load_patterns(args.input)
        text = Generator(config, patterns).run()
    except DispatchGenError as e:
        print(f'error: {e.stage}: {e}', file=sys.stderr)
        return 1

    write_output(text, args.output)
    if not config.quiet and args.output != '-':
        print(f'  => {args.output}', file=sys.stderr)
    return 0


if __name__ == '__main__':
    sys.exit(main())
