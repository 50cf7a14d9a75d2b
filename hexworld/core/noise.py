"""
Coherent noise sources sampled at axial coordinates.

Both sources are thin wrappers over OpenSimplex gradient noise and take
an explicit integer seed; nothing here draws from global random state.
"""

from opensimplex import OpenSimplex


class PerlinSource:
    """Single-octave gradient noise in roughly [-1, 1]."""

    def __init__(self, seed: int):
        self.seed = seed
        self._gen = OpenSimplex(seed=seed)

    def get(self, x: float, y: float) -> float:
        return float(self._gen.noise2(x, y))


class RidgedMultiSource:
    """
    Ridged multifractal noise in [-1, 1].

    Each octave folds the gradient noise into a ridge (1 - |n|), squares it
    and weights it by the previous octave's signal, which produces sharp
    connected crests along the zero lines of the base noise. Used for plate
    boundaries and mountain chains.
    """

    def __init__(
        self,
        seed: int,
        octaves: int = 6,
        lacunarity: float = 2.0,
        gain: float = 2.0,
        offset: float = 1.0,
    ):
        self.seed = seed
        self.octaves = octaves
        self.lacunarity = lacunarity
        self.gain = gain
        self.offset = offset
        self._gen = OpenSimplex(seed=seed)

        # Amplitude of each octave, persistence 1/lacunarity
        self._spectral_weights = [lacunarity ** (-i) for i in range(octaves)]
        self._max_value = sum(self._spectral_weights)

    def get(self, x: float, y: float) -> float:
        value = 0.0
        weight = 1.0
        for octave in range(self.octaves):
            signal = self.offset - abs(self._gen.noise2(x, y))
            signal *= signal
            signal *= weight

            weight = min(max(signal * self.gain, 0.0), 1.0)

            value += signal * self._spectral_weights[octave]
            x *= self.lacunarity
            y *= self.lacunarity

        normalized = value / self._max_value
        return float(min(max(normalized * 2.0 - 1.0, -1.0), 1.0))
