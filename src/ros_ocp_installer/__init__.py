"""ROS-OCP Helm chart installer."""

__version__ = "0.1.0"
