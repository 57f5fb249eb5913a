"""
Error types

Every fatal condition derives from DispatchGenError and names the pipeline
stage that raised it.
"""


class DispatchGenError(Exception):
    """Base class for fatal generation errors"""
    stage = 'generate'


class PatternError(DispatchGenError):
    """A routine pattern is malformed or the pattern list cannot be read"""
    stage = 'patterns'


class HeaderParseError(DispatchGenError):
    """The C header could not be preprocessed or parsed"""
    stage = 'parse'


class DuplicateSymbolError(DispatchGenError):
    """Two different declarations claim the same precision slot"""
    stage = 'scan'


class MissingPairingError(DispatchGenError):
    """A dispatch name lacks its 32-bit or 64-bit variant"""
    stage = 'pairing'


class IncompatiblePairError(DispatchGenError):
    """The 32-bit and 64-bit variants disagree on parameter shapes"""
    stage = 'pairing'


class UnsupportedDeclarationError(Exception):
    """A matching declaration uses a shape the extractor cannot reconstruct.

    Not fatal: the scanner reports it and skips the declaration.
    """
    stage = 'extract'

    def __init__(self, name: str, reason: str):
        super().__init__(f'{name}: {reason}')
        self.name = name
        self.reason = reason


class FormatError(DispatchGenError):
    """The source formatter rejected the generated code"""
    stage = 'format'
