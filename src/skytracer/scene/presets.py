"""Ready-made scenes.

Each factory builds a fresh World (clearing any previous scene) and returns
it together with the camera it is meant to be viewed through.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from skytracer.scene.presets import create_default_scene
    >>> world, camera = create_default_scene()
    >>> world.get_sphere_count()
    3
"""

from skytracer.camera.pinhole import PinholeCamera
from skytracer.core.color import COPPER_RGB
from skytracer.scene.world import World

# =============================================================================
# Scene Constants
# =============================================================================

# Large sphere standing in for the ground plane
GROUND_CENTER = (0.0, -100.5, -1.0)
GROUND_RADIUS = 100.0
GROUND_ALBEDO = (0.8, 0.8, 0.0)

CENTER_SPHERE_CENTER = (0.0, 0.0, -1.0)
LEFT_SPHERE_CENTER = (-1.0, 0.0, -1.0)
SMALL_SPHERE_RADIUS = 0.5

CENTER_MATTE_ALBEDO = (0.8, 0.6, 0.2)
COPPER_FUZZINESS = 0.5

RED_MATTE_ALBEDO = (0.8, 0.3, 0.3)


def create_default_scene(
    camera: PinholeCamera | None = None,
) -> tuple[World, PinholeCamera]:
    """Create the three-sphere scene.

    - A matte orange sphere in the center, one unit in front of the camera
    - A fuzzy copper sphere to its left
    - A huge yellow matte sphere acting as the ground

    Args:
        camera: Camera to return with the scene. Defaults to a 16:9
            PinholeCamera with viewport height 2 and focal length 1.

    Returns:
        Tuple of (World, PinholeCamera).
    """
    world = World()

    world.add_matte_sphere(CENTER_SPHERE_CENTER, SMALL_SPHERE_RADIUS, CENTER_MATTE_ALBEDO)
    world.add_metal_sphere(
        LEFT_SPHERE_CENTER,
        SMALL_SPHERE_RADIUS,
        COPPER_RGB,
        fuzziness=COPPER_FUZZINESS,
    )
    world.add_matte_sphere(GROUND_CENTER, GROUND_RADIUS, GROUND_ALBEDO)

    return world, camera if camera is not None else PinholeCamera()


def create_two_sphere_scene(
    camera: PinholeCamera | None = None,
) -> tuple[World, PinholeCamera]:
    """Create a red matte sphere resting on a yellow matte ground sphere.

    Returns:
        Tuple of (World, PinholeCamera).
    """
    world = World()

    world.add_matte_sphere(CENTER_SPHERE_CENTER, SMALL_SPHERE_RADIUS, RED_MATTE_ALBEDO)
    world.add_matte_sphere(GROUND_CENTER, GROUND_RADIUS, GROUND_ALBEDO)

    return world, camera if camera is not None else PinholeCamera()
