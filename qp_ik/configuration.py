"""Kinematic state of a robot model.

The Configuration class encapsulates a Pinocchio model and data, offering
easy access to the frame poses and Jacobians the tasks consume at every
control cycle.
"""

import logging
from typing import List, Optional

import numpy as np
import pinocchio as pin

from . import constants as consts
from .exceptions import EvaluationError, InvalidFrame


class Configuration:
    """Encapsulates a Pinocchio model and data for convenient access to kinematic quantities.

    Jacobians are expressed in the mixed representation (origin of the frame,
    orientation of the world), so that the robot velocity maps to the frame
    linear velocity and the angular velocity in world coordinates.

    Key functionalities include:
    * Running forward kinematics when the state changes.
    * Checking configuration limits.
    * Computing frame and center-of-mass Jacobians.
    * Integrating velocities to update configurations.
    """

    def __init__(
        self,
        model: pin.Model,
        q: Optional[np.ndarray] = None,
        v: Optional[np.ndarray] = None,
    ):
        """Constructor.

        Args:
            model: Pinocchio model.
            q: Configuration to initialize from. If None, the configuration is
                initialized to the neutral configuration.
            v: Generalized velocity. If None, zero.
        """
        self.model = model
        self.data = model.createData()
        self._v = np.zeros(model.nv)

        if q is None:
            q = pin.neutral(model)

        self.update(q=q, v=v)

    def update(self, q: Optional[np.ndarray] = None, v: Optional[np.ndarray] = None) -> None:
        """Run forward kinematics and refresh the Jacobians.

        Args:
            q: Optional configuration vector to override internal data.q with.
            v: Optional generalized velocity.
        """
        if q is not None:
            q = np.asarray(q, dtype=float)
            if q.shape != (self.model.nq,):
                raise EvaluationError(
                    f"Expected configuration of shape ({self.model.nq},), got {q.shape}"
                )
            self.data.q = q.copy()
        if v is not None:
            v = np.asarray(v, dtype=float)
            if v.shape != (self.model.nv,):
                raise EvaluationError(
                    f"Expected velocity of shape ({self.model.nv},), got {v.shape}"
                )
            self._v = v.copy()

        pin.computeJointJacobians(self.model, self.data, self.data.q)
        pin.updateFramePlacements(self.model, self.data)
        pin.jacobianCenterOfMass(self.model, self.data, self.data.q)

    @property
    def q(self) -> np.ndarray:
        """Current configuration."""
        return self.data.q

    @property
    def v(self) -> np.ndarray:
        """Current generalized velocity."""
        return self._v

    @property
    def nq(self) -> int:
        return self.model.nq

    @property
    def nv(self) -> int:
        return self.model.nv

    @property
    def frame_names(self) -> List[str]:
        return [frame.name for frame in self.model.frames]

    def _frame_id(self, frame_name: str) -> int:
        if not self.model.existFrame(frame_name):
            raise InvalidFrame(frame_name, self.frame_names)
        return self.model.getFrameId(frame_name)

    def check_limits(self, tol: float = consts.DEFAULT_TOLERANCE, safety_break: bool = True) -> bool:
        """Check that the current configuration is within bounds.

        Args:
            tol: Tolerance in [rad] or [m].
            safety_break: If True, raise an EvaluationError when the configuration
                is outside limits. If False, log a warning and continue.

        Returns:
            True if every coordinate is within its limits.
        """
        q = self.data.q
        q_min = self.model.lowerPositionLimit
        q_max = self.model.upperPositionLimit

        within_limits = True
        for i in range(self.model.nq):
            if q[i] < q_min[i] - tol or q[i] > q_max[i] + tol:
                within_limits = False
                message = (
                    f"Value {q[i]:.4f} at index {i} is outside of its limits: "
                    f"[{q_min[i]:.4f}, {q_max[i]:.4f}]"
                )
                if safety_break:
                    raise EvaluationError(message)
                logging.warning(message)
        return within_limits

    def get_frame_jacobian(self, frame_name: str) -> np.ndarray:
        """Jacobian of a frame velocity in mixed representation.

        Returns:
            Jacobian of shape (6, nv) - [linear velocity; angular velocity].
        """
        frame_id = self._frame_id(frame_name)
        return pin.getFrameJacobian(
            self.model,
            self.data,
            frame_id,
            pin.ReferenceFrame.LOCAL_WORLD_ALIGNED,
        )

    def get_transform_frame_to_world(self, frame_name: str) -> pin.SE3:
        """Pose of a frame in the world frame."""
        frame_id = self._frame_id(frame_name)
        return self.data.oMf[frame_id].copy()

    def get_com_position(self) -> np.ndarray:
        return self.data.com[0].copy()

    def get_com_jacobian(self) -> np.ndarray:
        """Jacobian of the center of mass, shape (3, nv)."""
        return self.data.Jcom.copy()

    def integrate(self, velocity: np.ndarray, dt: float) -> np.ndarray:
        """Integrate a tangent velocity and return the new configuration."""
        return pin.integrate(self.model, self.data.q, velocity * dt)

    def integrate_inplace(self, velocity: np.ndarray, dt: float) -> None:
        """Integrate a tangent velocity and update the configuration in place."""
        self.update(q=self.integrate(velocity, dt), v=velocity)
