# -*- coding: utf-8 -*-
"""
Hierarchical clustering of co-working spaces on binary attributes.

- loading.py: spreadsheet reading and binary validation
- distance.py: Gower dissimilarity matrix
- hierarchical.py: Ward (ward.D2) linkage and dendrogram cut
- projection.py: PCA of the dissimilarity matrix and cluster plot
- summary.py: per-cluster percentages, country counts, interpretations
- export.py: dated multi-sheet workbook
- pipeline.py: orchestration and command-line entry point
"""

__version__ = "1.0.0"
