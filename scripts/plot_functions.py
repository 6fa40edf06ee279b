import hashlib
import math

from fnplot.core.axis import LnScaled, Scaled, Std
from fnplot.sampling import (
    Fn,
    FnPlot,
    alpha_string,
    configure_logging,
    float64_range,
    int_range,
)

# --- User configuration dictionary ---
CONFIG = {
    "LOG_LEVEL": "SUCCESS",  # logging level: DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL
    "SAMPLES": 2000,  # samples drawn per plot
    "SEED": None,  # set to an int for reproducible plots
    "OUTPUT_PATH": "./",
    "PLOTS": [
        {
            "title": "sin",
            "filename": "sin.png",
            "fn": Fn(math.sin, float64_range(-2 * math.pi, 2 * math.pi)),
            "x": Std(),
            "y": Std(),
        },
        {
            "title": "upper",
            "filename": "upper.png",
            "fn": Fn(str.upper, alpha_string()),
            "x": LnScaled(100),
            "y": LnScaled(100),
        },
        {
            "title": "sha256",
            "filename": "sha256.png",
            "fn": Fn(lambda n: hashlib.sha256(str(n).encode()).digest(), int_range(0, 10000)),
            "x": Scaled(100),
            "y": Scaled(100),
            "samples": 500,  # per-plot override
        },
    ],
}


def main() -> None:
    """
    Main function to sample and save all configured plots.
    """
    configure_logging(CONFIG.get("LOG_LEVEL", "INFO"))

    for plot_config in CONFIG["PLOTS"]:
        FnPlot(
            title=plot_config["title"],
            filename=CONFIG["OUTPUT_PATH"] + plot_config["filename"],
            fn=plot_config["fn"],
            samples=plot_config.get("samples", CONFIG["SAMPLES"]),
            x=plot_config["x"],
            y=plot_config["y"],
            seed=CONFIG.get("SEED"),
        ).save()


if __name__ == "__main__":
    main()
