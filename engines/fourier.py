"""
1D discrete Fourier transform along one axis of an array.

Power-of-two lengths use an iterative radix-2 Cooley-Tukey pass; every other
length goes through Bluestein's chirp-z identity, which turns the transform
into a power-of-two circular convolution.
"""

import numpy as np


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _bit_reverse_indices(n: int) -> np.ndarray:
    bits = n.bit_length() - 1
    idx = np.arange(n)
    rev = np.zeros(n, dtype=np.intp)
    for b in range(bits):
        rev |= ((idx >> b) & 1) << (bits - 1 - b)
    return rev


def _radix2(a: np.ndarray, inverse: bool) -> np.ndarray:
    """Unnormalized radix-2 transform over the last axis (length 2^k)."""
    n = a.shape[-1]
    lead = a.shape[:-1]
    a = a[..., _bit_reverse_indices(n)]
    sign = 1.0 if inverse else -1.0

    size = 2
    while size <= n:
        half = size // 2
        twiddle = np.exp(sign * 2j * np.pi * np.arange(half) / size)
        blocks = a.reshape(lead + (n // size, size))
        even = blocks[..., :half]
        odd = blocks[..., half:] * twiddle
        a = np.concatenate((even + odd, even - odd), axis=-1).reshape(lead + (n,))
        size *= 2
    return a


def _bluestein(a: np.ndarray, inverse: bool) -> np.ndarray:
    """Unnormalized transform over the last axis for any length."""
    n = a.shape[-1]
    m = 1
    while m < 2 * n - 1:
        m *= 2

    # n^2 mod 2n keeps the chirp phase exact for large n
    k = np.arange(n)
    phase = np.pi * ((k * k) % (2 * n)) / n
    chirp = np.exp((1j if inverse else -1j) * phase)

    padded = np.zeros(a.shape[:-1] + (m,), dtype=np.complex128)
    padded[..., :n] = a * chirp

    kernel = np.zeros(m, dtype=np.complex128)
    kernel[:n] = np.conj(chirp)
    if n > 1:
        kernel[m - n + 1:] = np.conj(chirp[1:])[::-1]

    spectrum = _radix2(padded, inverse=False) * _radix2(kernel, inverse=False)
    conv = _radix2(spectrum, inverse=True) / m
    return conv[..., :n] * chirp


def _transform(a, axis: int, inverse: bool) -> np.ndarray:
    arr = np.moveaxis(np.asarray(a, dtype=np.complex128), axis, -1)
    n = arr.shape[-1]
    if n == 0:
        raise ValueError("Cannot transform an empty axis")
    if _is_power_of_two(n):
        out = _radix2(arr, inverse)
    else:
        out = _bluestein(arr, inverse)
    if inverse:
        out = out / n
    return np.moveaxis(out, -1, axis)


def fft(a, axis: int = -1) -> np.ndarray:
    """Forward DFT: X[k] = sum_n x[n] exp(-2j*pi*k*n/N)."""
    return _transform(a, axis, inverse=False)


def ifft(a, axis: int = -1) -> np.ndarray:
    """Inverse DFT, normalized by 1/N so that ifft(fft(x)) == x."""
    return _transform(a, axis, inverse=True)
