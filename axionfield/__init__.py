"""axionfield — axion propagation and axion-photon conversion in magnetic fields."""

from axionfield.constants import APP_VERSION as __version__

__all__ = ["__version__"]
