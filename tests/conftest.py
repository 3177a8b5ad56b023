import os
import sys

# Ensure project root (for pods) and libs are importable in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
LIBS = os.path.join(ROOT, "libs")
for p in (ROOT, LIBS):
    if p not in sys.path:
        sys.path.insert(0, p)
