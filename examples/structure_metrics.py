import logging

import numpy as np

from pyDVHMetrics import (
    DvhCurve,
    MetricsConfig,
    StructureDvh,
    aggregate_prescribed_dose,
    compute_geud,
    compute_hi,
    evaluate_structures,
)

logging.basicConfig(level=logging.INFO)

# Cumulative DVH as exported by a treatment planning system (volume [%], dose [Gy])
ptv = DvhCurve.from_samples(
    [(100.0, 0.0), (98.0, 45.0), (50.0, 50.0), (2.0, 55.0), (0.0, 56.0)], name="PTV"
)
print(f"gEUD(PTV, a=-0.1) = {compute_geud(ptv, -0.1):.2f} Gy")
print(f"HI(PTV) = {compute_hi(ptv, 50.0):.2f}")

# DVHs computed from a dose distribution and structure masks
rng = np.random.default_rng(42)
dose = rng.normal(50.0, 1.0, size=(20, 40, 40)).clip(min=0.0)
dose[:, :, :20] *= 0.3

ptv_mask = np.zeros(dose.shape, dtype=np.uint8)
ptv_mask[5:15, 10:30, 25:35] = 1
lung_mask = np.zeros(dose.shape, dtype=np.uint8)
lung_mask[:, :, :22] = 1

config = MetricsConfig()
structures = [
    StructureDvh.from_dose("PTV_5000", dose, ptv_mask, bin_width=config.bin_width),
    StructureDvh.from_dose("Lung_L", dose, lung_mask, bin_width=config.bin_width),
]

# Composite plan: 45 Gy base plan and 5 Gy boost
prescribed_dose = aggregate_prescribed_dose([45.0, 5.0])

for info in evaluate_structures(structures, config, prescribed_dose):
    print(info.summary())
