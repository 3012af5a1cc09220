"""Simulation pipeline: shapes, lights, ray marching and the pixel buffer."""
