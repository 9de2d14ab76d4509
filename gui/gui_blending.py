"""Tkinter GUI for Laplacian-pyramid (multi-band) image blending.

Behavior:
- Pick image A and image B from disk; both are bounded to 512px and brought
  to a common size before blending.
- Choose the gradient mask shape and the pyramid depth, then click Generate.
  Blending runs on a background thread; a new Generate supersedes an
  unfinished one.
- **No auto-saving**: generating only updates the preview; saving is manual.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import cv2
import numpy as np
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from PIL import Image, ImageTk

from app.multiband_blending.config import BlendConfig
from app.multiband_blending.errors import SourceLoadFailed
from app.multiband_blending.evaluation import compute_q_abf
from app.multiband_blending.fusion import BlendResult
from app.multiband_blending.mask import MASK_TYPES, create_gradient_mask
from app.multiband_blending.preprocess import ensure_same_size, load_image, save_png
from app.multiband_blending.raster import Raster
from app.multiband_blending.runner import BlendRunner

IMAGE_FILETYPES = [("Images", "*.png *.jpg *.jpeg *.bmp *.webp"), ("All files", "*.*")]


def _fit(image_rgb: np.ndarray, max_w: int, max_h: int) -> np.ndarray:
    h, w = image_rgb.shape[:2]
    scale = min(float(max_h) / float(max(h, 1)), float(max_w) / float(max(w, 1)))
    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    interp = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_NEAREST
    return cv2.resize(image_rgb, (new_w, new_h), interpolation=interp)


class BlendingGUI:
    """Multi-band blending GUI that can be embedded into another Tkinter container."""

    def __init__(self, root: tk.Tk, *, parent: Optional[tk.Misc] = None, config: Optional[BlendConfig] = None) -> None:
        self.root = root
        self.parent: tk.Misc = parent or root
        self.config = config or BlendConfig()

        project_root = Path(__file__).resolve().parents[1]
        self.output_dir = project_root / "outputs" / "multiband_blending"

        self.sources: dict[str, Optional[Raster]] = {"A": None, "B": None}
        self.result: Optional[BlendResult] = None

        # Tk images must stay referenced while shown.
        self._tk_images: list[ImageTk.PhotoImage] = []

        self.runner = BlendRunner(
            on_result=self._on_blend_done,
            on_error=lambda req_id, exc: self.root.after(0, lambda: self._show_error(req_id, exc)),
        )

        self._build_widgets()

    # -------------------------
    # UI construction
    # -------------------------

    def _build_widgets(self) -> None:
        # 1. Image Selection
        frame_select = ttk.LabelFrame(self.parent, text="1. Select Images")
        frame_select.pack(fill="x", padx=10, pady=5)

        self.source_labels: dict[str, ttk.Label] = {}
        for row, key in enumerate(("A", "B")):
            hint = "mask white" if key == "A" else "mask black"
            ttk.Button(frame_select, text=f"Image {key}...", command=lambda k=key: self._choose_image(k)).grid(
                row=row, column=0, padx=10, pady=5, sticky="w"
            )
            label = ttk.Label(frame_select, text=f"(none, used where {hint})")
            label.grid(row=row, column=1, padx=10, pady=5, sticky="w")
            self.source_labels[key] = label

        # 2. Blend Settings
        frame_settings = ttk.LabelFrame(self.parent, text="2. Blend Settings")
        frame_settings.pack(fill="x", padx=10, pady=5)

        ttk.Label(frame_settings, text="Mask Type:").grid(row=0, column=0, padx=10, pady=5, sticky="w")
        self.mask_var = tk.StringVar(value=self.config.mask_type)
        frame_mask_opts = ttk.Frame(frame_settings)
        frame_mask_opts.grid(row=0, column=1, sticky="w")
        for kind in MASK_TYPES:
            ttk.Radiobutton(frame_mask_opts, text=kind.capitalize(), variable=self.mask_var, value=kind).pack(
                side="left", padx=5
            )

        self.level_var = tk.IntVar(value=max(1, min(7, self.config.levels)))
        self.level_label = ttk.Label(frame_settings, text=f"Levels: {self.level_var.get()}")
        self.level_label.grid(row=1, column=0, padx=10, pady=5, sticky="w")
        self.level_scale = ttk.Scale(
            frame_settings, from_=1, to=7, variable=self.level_var, orient="horizontal", command=self._update_level_label
        )
        self.level_scale.grid(row=1, column=1, padx=10, pady=5, sticky="ew")
        frame_settings.columnconfigure(1, weight=1)

        # 3. Actions & Status
        frame_action = ttk.Frame(self.parent)
        frame_action.pack(fill="x", padx=10, pady=10)

        self.btn_generate = ttk.Button(frame_action, text="Generate Blended Image", command=self._start_generation)
        self.btn_generate.pack(fill="x", pady=5)

        self.btn_save = ttk.Button(frame_action, text="Save blended image", command=self._save_result)
        self.btn_save.pack(fill="x", pady=5)
        self.btn_save.config(state="disabled")

        self.status_label = ttk.Label(frame_action, text="Ready")
        self.status_label.pack()

        # 4. Result + Laplacian bands
        self.result_label = ttk.Label(self.parent, text="(Result will appear after you click Generate)", anchor="center")
        self.result_label.pack(expand=True, fill="both", padx=10, pady=5)

        frame_bands = ttk.LabelFrame(self.parent, text="Blended Laplacian levels (gray = 0)")
        frame_bands.pack(fill="x", padx=10, pady=5)
        self.bands_frame = ttk.Frame(frame_bands)
        self.bands_frame.pack(fill="x", padx=5, pady=5)

    # -------------------------
    # UI callbacks
    # -------------------------

    def _update_level_label(self, value: str) -> None:
        self.level_label.config(text=f"Levels: {int(float(value))}")

    def _choose_image(self, key: str) -> None:
        path = filedialog.askopenfilename(title=f"Choose image {key}", filetypes=IMAGE_FILETYPES)
        if not path:
            return
        try:
            self.sources[key] = load_image(path, self.config.limit_dimension)
        except SourceLoadFailed as exc:
            messagebox.showerror("Image load failed", str(exc))
            return
        raster = self.sources[key]
        self.source_labels[key].config(text=f"{Path(path).name} ({raster.width}x{raster.height})")

    def _start_generation(self) -> None:
        image_a, image_b = self.sources["A"], self.sources["B"]
        if image_a is None or image_b is None:
            messagebox.showerror("Error", "Please select both images first.")
            return

        image_a, image_b = ensure_same_size(image_a, image_b)
        mask = create_gradient_mask(image_a.width, image_a.height, self.mask_var.get())
        levels = int(self.level_var.get())

        self.result = None
        self.btn_save.config(state="disabled")
        self.status_label.config(text=f"Blending with {levels} levels...")
        self.runner.submit(
            image_a,
            image_b,
            mask,
            levels,
            sigma=self.config.sigma,
            kernel=self.config.kernel,
            clamp_alpha=self.config.clamp_alpha,
        )

    # -------------------------
    # Rendering / saving
    # -------------------------

    def _on_blend_done(self, req_id: int, result: BlendResult) -> None:
        # Worker thread: score here so the Tk loop only draws.
        score = compute_q_abf(result.result, result.gaussian_levels_a[0], result.gaussian_levels_b[0])
        self.root.after(0, lambda: self._show_result(req_id, result, score))

    def _show_result(self, req_id: int, result: BlendResult, score: float) -> None:
        if not self.runner.is_current(req_id):
            return
        self.result = result
        self._tk_images = []

        preview = _fit(result.result.to_image(), 640, 480)
        img_tk = ImageTk.PhotoImage(Image.fromarray(preview))
        self._tk_images.append(img_tk)
        self.result_label.config(image=img_tk, text="")

        for child in self.bands_frame.winfo_children():
            child.destroy()
        for k, band in enumerate(result.laplacian_levels):
            thumb = _fit(band.to_visual_image(), 120, 120)
            band_tk = ImageTk.PhotoImage(Image.fromarray(thumb))
            self._tk_images.append(band_tk)
            ttk.Label(self.bands_frame, image=band_tk, text=f"L{k}", compound="top").pack(side="left", padx=3)

        self.status_label.config(text=f"Done! Q_AB/F: {score:.4f} (Preview updated)")
        self.btn_save.config(state="normal")

    def _show_error(self, req_id: int, exc: BaseException) -> None:
        if not self.runner.is_current(req_id):
            return
        messagebox.showerror("Error", str(exc))
        self.status_label.config(text="Error occurred")

    def _save_result(self) -> None:
        if self.result is None:
            messagebox.showerror("Error", "Nothing to save yet. Generate a blended image first.")
            return

        self.output_dir.mkdir(parents=True, exist_ok=True)
        out_path = filedialog.asksaveasfilename(
            initialdir=str(self.output_dir),
            initialfile=f"blended_{self.mask_var.get()}_L{int(self.level_var.get())}.png",
            defaultextension=".png",
            filetypes=[("PNG image", "*.png")],
            title="Save blended image",
        )
        if not out_path:
            return

        try:
            save_png(out_path, self.result.result)
            self.status_label.config(text=f"Saved: {Path(out_path).name}")
        except OSError as exc:
            messagebox.showerror("Save failed", str(exc))


if __name__ == "__main__":
    root = tk.Tk()
    root.title("Multi-band Blending GUI")
    root.geometry("900x1000")
    BlendingGUI(root)
    root.mainloop()
