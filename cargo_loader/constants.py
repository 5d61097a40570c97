"""Default container and the sample crate list used by the app template."""

from __future__ import annotations

DEFAULT_CONTAINER_DIMS: dict[str, float] = {"length": 8200, "width": 2300, "height": 2300}
DEFAULT_MAX_CONTAINERS = 10

# (id, length, width, height, weight) in mm / kg
SAMPLE_CARGO: tuple[tuple[int, float, float, float, float], ...] = (
    (1, 795, 770, 1685, 84),
    (2, 800, 765, 1695, 84.6),
    (3, 790, 755, 1685, 85),
    (4, 1170, 950, 2035, 257.6),
    (5, 1665, 1130, 765, 183.2),
    (6, 1140, 930, 1600, 207),
    (7, 1170, 950, 2030, 258),
    (8, 1665, 1130, 765, 182.6),
    (9, 1468, 755, 860, 72.8),
    (10, 1945, 675, 930, 121),
    (11, 1090, 1040, 990, 142.6),
    (12, 2200, 760, 855, 102.4),
    (13, 2200, 760, 855, 102.4),
    (14, 1280, 910, 1070, 140.2),
    (15, 1760, 790, 850, 268),
    (16, 1990, 910, 1070, 199.4),
    (17, 2085, 940, 820, 480.6),
    (18, 1495, 1190, 900, 454),
    (19, 1920, 630, 850, 307),
    (20, 1660, 1130, 770, 182),
    (21, 1965, 610, 955, 72.6),
    (22, 485, 220, 1510, 82),
    (23, 1000, 610, 2030, 92.4),
    (24, 1105, 660, 1740, 187.4),
    (25, 850, 785, 1465, 149.4),
    (26, 1070, 970, 1580, 203),
    (27, 1115, 660, 2060, 315.4),
    (28, 850, 725, 1610, 182),
    (29, 1030, 1015, 2090, 682),
)
