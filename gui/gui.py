"""Demo GUI entry point for multi-band image blending.

Run from the repo root:
    python -m gui.gui [--config settings.yaml]
"""

from __future__ import annotations

import argparse
import logging
import tkinter as tk
from pathlib import Path
from tkinter import ttk

from app.multiband_blending.config import load_config
from gui.gui_blending import BlendingGUI


def main() -> None:
    parser = argparse.ArgumentParser(description="Multi-band blending GUI")
    parser.add_argument("--config", type=Path, help="YAML file with blend settings", default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    root = tk.Tk()
    root.title("DSP Lab - Multi-band Blending")
    root.geometry("980x1040")

    nb = ttk.Notebook(root)
    nb.pack(fill="both", expand=True)

    blend_frame = ttk.Frame(nb)
    nb.add(blend_frame, text="Laplacian Pyramid Blending")

    # Embedded UI still uses `root` for scheduling + dialogs.
    BlendingGUI(root, parent=blend_frame, config=load_config(args.config))

    root.mainloop()


if __name__ == "__main__":
    main()
