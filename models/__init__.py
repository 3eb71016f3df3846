"""Data models for spectra, masks, results and worker messages."""

from .errors import KSpaceError, InvalidDimensions, NoSpectrumLoaded, ChannelFailure
from .kspace_params import KSpaceParams
from .spectrum import Spectrum
from .mask import CircleMask
from .recon_result import ReconstructionResult
from .kspace_result import KSpaceResult
from .messages import LoadSpectrum, CircleRecon, Loaded, Reconstructed, ReconError

__all__ = [
    'KSpaceError',
    'InvalidDimensions',
    'NoSpectrumLoaded',
    'ChannelFailure',
    'KSpaceParams',
    'Spectrum',
    'CircleMask',
    'ReconstructionResult',
    'KSpaceResult',
    'LoadSpectrum',
    'CircleRecon',
    'Loaded',
    'Reconstructed',
    'ReconError',
]
