"""Perception events, object tracking, face alignment helpers and swarm message buffering for autonomous drones."""

__version__ = "0.1.0"