"""
K-Space Lab
Inspect an image's k-space and reconstruct it from a circular region
"""

import logging
import sys


def run_gui():
    """Launch the GUI application."""
    from PySide6.QtWidgets import QApplication
    from PySide6.QtCore import Qt
    from gui.main_window import MainWindow, APP_NAME, APP_VERSION

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)
    app.setStyle("Fusion")

    window = MainWindow()
    window.show()
    window.restore_session()
    sys.exit(app.exec())


def run_cli():
    """Run CLI mode: k-space and (optionally masked) reconstruction to PNG."""
    from models.kspace_params import KSpaceParams
    from models.mask import CircleMask
    from engines.pipeline import compute_kspace
    from engines.recon_service import ReconstructionService
    from engines.renderer import normalize_to_uint8
    from utils.test_images import generate_disk
    from utils.image_io import load_grayscale, save_image
    from utils.metrics import compute_psnr_ssim, mask_coverage

    args = sys.argv[2:]

    if not args or args[0] == '--help':
        print("Usage: python main.py --cli <image_path> [radius [cx cy]]")
        print("       python main.py --cli --synthetic [radius [cx cy]]")
        sys.exit(0)

    params = KSpaceParams()

    if args[0] == '--synthetic':
        print("Generating test image...")
        gray = generate_disk(params.max_dim)
    else:
        print(f"Loading: {args[0]}")
        gray = load_grayscale(args[0], params.max_dim)

    result = compute_kspace(gray)
    print(f"Grid: {result.cols}x{result.rows}")

    radius = int(args[1]) if len(args) > 1 else params.initial_radius
    if len(args) > 3:
        cx, cy = int(args[2]), int(args[3])
    else:
        cx, cy = result.cols // 2, result.rows // 2
    mask = CircleMask(cx=cx, cy=cy, radius=radius)

    service = ReconstructionService()
    service.load(result.spectrum)
    recon = service.reconstruct(mask)

    reference = normalize_to_uint8(result.grid)
    coverage = mask_coverage(result.spectrum, mask)
    metrics = compute_psnr_ssim(reference, recon.pixels)

    print("\n=== Results ===")
    print(f"Mask:      center=({cx}, {cy}) radius={radius}")
    print(f"Coeffs:    {coverage['retained_coeffs']}/{coverage['total_coeffs']} "
          f"({coverage['coeff_fraction'] * 100:.1f}%)")
    print(f"Energy:    {coverage['energy_fraction'] * 100:.2f}%")
    print(f"PSNR:      {metrics['psnr']:.2f} dB")
    print(f"SSIM:      {metrics['ssim']:.4f}")
    print(f"Time:      {result.forward_time_ms + recon.elapsed_ms:.2f} ms")

    save_image(result.kspace_image, "kspace.png")
    save_image(recon.pixels, "reconstructed.png")
    print("\nSaved: kspace.png, reconstructed.png")


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    if len(sys.argv) > 1 and sys.argv[1] == '--cli':
        run_cli()
    else:
        run_gui()


if __name__ == '__main__':
    main()
