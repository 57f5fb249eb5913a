"""
Shared fixtures: a preprocessed excerpt of mkl.h in the shapes MKL uses.
"""

import os
import sys

import pytest

# Add scripts to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'scripts'))

from dispatch_gen import PatternList, parse_text, scan_translation_unit


MKL_EXCERPT = '''
typedef unsigned long size_t;
typedef int lapack_int;
typedef enum {CblasRowMajor=101, CblasColMajor=102} CBLAS_LAYOUT;
typedef enum {CblasNoTrans=111, CblasTrans=112, CblasConjTrans=113} CBLAS_TRANSPOSE;
typedef enum {CblasUpper=121, CblasLower=122} CBLAS_UPLO;
typedef struct _MKL_Complex8 { float real; float imag; } MKL_Complex8;

int mkl_get_max_threads(void);
extern int mkl_verbose_level;

void cblas_sgemm(const CBLAS_LAYOUT Layout, const CBLAS_TRANSPOSE TransA,
                 const CBLAS_TRANSPOSE TransB, const int M, const int N,
                 const int K, const float alpha, const float *A,
                 const int lda, const float *B, const int ldb,
                 const float beta, float *C, const int ldc);
void cblas_dgemm(const CBLAS_LAYOUT Layout, const CBLAS_TRANSPOSE TransA,
                 const CBLAS_TRANSPOSE TransB, const int M, const int N,
                 const int K, const double alpha, const double *A,
                 const int lda, const double *B, const int ldb,
                 const double beta, double *C, const int ldc);
void cblas_cgemm(const CBLAS_LAYOUT Layout, const CBLAS_TRANSPOSE TransA,
                 const CBLAS_TRANSPOSE TransB, const int M, const int N,
                 const int K, const void *alpha, const void *A,
                 const int lda, const void *B, const int ldb,
                 const void *beta, void *C, const int ldc);

float cblas_sdot(const int N, const float *X, const int incX, const float *Y, const int incY);
double cblas_ddot(const int N, const double *X, const int incX, const double *Y, const int incY);

lapack_int LAPACKE_spotrf(int matrix_layout, char uplo, lapack_int n, float *a, lapack_int lda);
lapack_int LAPACKE_dpotrf(int matrix_layout, char uplo, lapack_int n, double *a, lapack_int lda);

void vsMul(const int n, const float a[], const float b[], float r[]);
void vdMul(const int n, const double a[], const double b[], double r[]);
'''

MKL_PATTERNS = ['cblas_*gemm', 'cblas_*dot', 'LAPACKE_*potrf', 'v*Mul']


@pytest.fixture
def mkl_ast():
    return parse_text(MKL_EXCERPT, 'mkl.h')


@pytest.fixture
def mkl_patterns():
    return PatternList.from_strings(MKL_PATTERNS)


@pytest.fixture
def mkl_registry(mkl_ast, mkl_patterns):
    return scan_translation_unit(mkl_ast, mkl_patterns, quiet=True)
