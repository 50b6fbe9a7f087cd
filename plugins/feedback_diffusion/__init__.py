"""
Reaction-diffusion style patterns from an image feedback loop.

Every tick the previous frame is blurred and unsharp-masked and written
back as the next frame. Stamped perturbations (cursor, random points,
text) grow into organic, branching structure.
"""
