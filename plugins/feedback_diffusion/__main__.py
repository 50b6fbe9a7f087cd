"""
Reaction-Diffusion Feedback Viewer - Entry Point

Usage:
    python -m feedback_diffusion [--resolution N] [--seed PATH] [--window N]
    python -m feedback_diffusion --snap STEPS [--out DIR]

Examples:
    python -m feedback_diffusion
    python -m feedback_diffusion --resolution 500
    python -m feedback_diffusion --seed NoiseMono_2.png
    python -m feedback_diffusion --snap 200 --out screenshots

Resolutions: 100, 200, 300, 400, 500, 600. The chosen resolution is
remembered across restarts.
"""

import sys

from .config import RESOLUTIONS, ResolutionStore
from .frame import SeedImageError


def snap(resolution, seed_image, steps, out_dir):
    """Headless mode: run N ticks, save the final frame, exit."""
    from .simulator import FeedbackSimulator

    sim = FeedbackSimulator(resolution=resolution, seed_image=seed_image,
                            export_dir=out_dir)
    print(f"[RD] {resolution}x{resolution}: running {steps} ticks...", end="", flush=True)
    for _ in range(steps):
        sim.tick()
    print()
    return sim.export_frame()


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    store = ResolutionStore()
    resolution = None
    seed_image = None
    window = 600
    snap_steps = 0
    out_dir = "screenshots"

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--resolution" and i + 1 < len(args):
            resolution = int(args[i + 1])
            if resolution not in RESOLUTIONS:
                print(f"Unsupported resolution: {resolution}")
                print(f"Choose one of: {', '.join(str(r) for r in RESOLUTIONS)}")
                return 2
            i += 2
        elif arg == "--seed" and i + 1 < len(args):
            seed_image = args[i + 1]
            i += 2
        elif arg == "--window" and i + 1 < len(args):
            window = int(args[i + 1])
            i += 2
        elif arg == "--snap" and i + 1 < len(args):
            snap_steps = int(args[i + 1])
            i += 2
        elif arg == "--out" and i + 1 < len(args):
            out_dir = args[i + 1]
            i += 2
        elif arg in ("--help", "-h"):
            print(__doc__)
            return 0
        else:
            print(f"Unknown argument: {arg}")
            print("Use --help to see available options")
            return 2

    if resolution is not None:
        store.save(resolution)
    else:
        resolution = store.load()

    try:
        if snap_steps > 0:
            print(f"Headless snap mode: {resolution}x{resolution}, {snap_steps} ticks")
            snap(resolution, seed_image, snap_steps, out_dir)
            return 0

        from .viewer import Viewer

        print("Starting Reaction-Diffusion Viewer")
        print(f"  Resolution: {resolution}x{resolution}")
        print(f"  Seed: {seed_image or 'built-in noise'}")
        print(f"  Window: {window}x{window}")
        print()

        viewer = Viewer(resolution=resolution, seed_image=seed_image, window=window,
                        settings_path=store.path)
        viewer.run()
    except SeedImageError as e:
        print(f"[RD] {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
