from pathlib import Path
from typing import Sequence, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

from .peaks import Peak  # noqa: E402


def plot_spectrogram(
    spectrogram: np.ndarray,
    output_path: Union[str, Path],
    show_db: bool = True,
):
    """
    Save a spectrogram image, time on x and frequency bin on y.

    Only the lower half of each frame is drawn; the upper half mirrors it.
    """
    S = np.asarray(spectrogram)
    half = S[:, : S.shape[1] // 2].T if S.size else np.zeros((1, 1))

    if show_db:
        S_plot = 20 * np.log10(half + np.finfo(float).eps)
        cbar_label = "Magnitude (dB)"
    else:
        S_plot = half / (half.max() + np.finfo(float).eps)
        cbar_label = "Normalized Magnitude (Linear)"

    plt.figure(figsize=(10, 6))
    plt.imshow(S_plot, origin="lower", aspect="auto", cmap="magma")
    plt.colorbar(label=cbar_label)
    plt.xlabel("Frame")
    plt.ylabel("Frequency bin")
    plt.title("Spectrogram")
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()


def plot_constellation(peaks: Sequence[Peak], output_path: Union[str, Path]):
    x_axis = [p.time_ms for p in peaks]
    y_axis = [p.freq_bin for p in peaks]
    plt.figure(figsize=(10, 8))
    plt.title("Constellation Diagram")
    plt.xlabel("Time (ms)")
    plt.ylabel("Frequency bin")
    plt.scatter(x_axis, y_axis, s=8)
    plt.tight_layout()
    plt.savefig(output_path)
    plt.close()
