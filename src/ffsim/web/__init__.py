"""Web API for ff-sim.

This package provides a Flask application that exposes the simulator
over HTTP.  It is an **optional** extra — install with::

    pip install ff-sim[web]
"""
