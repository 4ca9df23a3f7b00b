"""Template resolution — paths, resolvers, and the kida integration.

``paths`` and ``resolvers`` have no third-party dependencies;
``integration`` and ``renderer`` need kida (``pip install plume[kida]``).
"""
