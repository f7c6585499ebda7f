# ----------------------------------------------------
# Velocity control of a planar arm
# ----------------------------------------------------
#
# The tip of a 3R planar arm tracks a circle. The tip position is a soft
# task, the joint limits are hard constraints and a small regularization
# keeps the velocity bounded near singularities.

import logging
import sys
from pathlib import Path

import numpy as np
import pinocchio as pin

sys.path.insert(0, str(Path(__file__).parent.parent))
from qp_ik import (
    Configuration,
    FunctionWeightProvider,
    JointLimitsTask,
    JointVelocityLimitsTask,
    JointVelocityRegularizationTask,
    QPInverseKinematics,
    SE3Task,
)

DT = 0.01
DURATION = 4.0
LINK_LENGTH = 0.4
NUM_LINKS = 3
RADIUS = 0.2
CENTER = np.array([0.7, 0.0, 0.0])
ROBOT_VELOCITY = "robot_velocity"


def build_planar_arm() -> pin.Model:
    model = pin.Model()
    model.name = "planar_arm"
    joint_id = 0
    frame_id = 0
    placement = pin.SE3.Identity()
    for i in range(NUM_LINKS):
        joint_id = model.addJoint(joint_id, pin.JointModelRZ(), placement, f"joint{i + 1}")
        model.appendBodyToJoint(
            joint_id,
            pin.Inertia.FromSphere(1.0, 0.05),
            pin.SE3(np.eye(3), np.array([LINK_LENGTH / 2, 0.0, 0.0])),
        )
        frame_id = model.addJointFrame(joint_id, frame_id)
        placement = pin.SE3(np.eye(3), np.array([LINK_LENGTH, 0.0, 0.0]))
    model.addBodyFrame("tip", joint_id, placement, frame_id)
    model.lowerPositionLimit = np.full(NUM_LINKS, -2.5)
    model.upperPositionLimit = np.full(NUM_LINKS, 2.5)
    return model


def circle(t: float):
    omega = 2.0 * np.pi / DURATION
    position = CENTER + RADIUS * np.array([np.cos(omega * t), np.sin(omega * t), 0.0])
    velocity = RADIUS * omega * np.array([-np.sin(omega * t), np.cos(omega * t), 0.0])
    return position, velocity


def main():
    logging.basicConfig(level=logging.INFO)

    model = build_planar_arm()
    configuration = Configuration(model, q=np.array([0.3, 0.6, 0.6]))

    # Only the position in the plane matters
    tip_task = SE3Task("tip", kp_linear=10.0, kp_angular=0.0)
    regularization = JointVelocityRegularizationTask(model)
    joint_limits = JointLimitsTask(model, dt=DT, gain=0.9)
    velocity_limits = JointVelocityLimitsTask(
        model, {f"joint{i + 1}": 2.0 for i in range(NUM_LINKS)}
    )

    # Ramp the tracking in over the first second
    t = 0.0
    tip_weight = FunctionWeightProvider(
        lambda: min(1.0, 0.1 + t) * np.array([1.0, 1.0, 1.0, 0.0, 0.0, 0.0])
    )

    ik = QPInverseKinematics()
    ik.initialize({"primary_variable_name": ROBOT_VELOCITY, "verbosity": True})
    ik.add_task(joint_limits, "joint_limits", 0)
    ik.add_task(velocity_limits, "velocity_limits", 0)
    ik.add_task(tip_task, "tip", 1, tip_weight)
    ik.add_task(regularization, "regularization", 1, [1e-3] * model.nv)
    if not ik.finalize({ROBOT_VELOCITY: model.nv}):
        raise SystemExit(f"Unable to finalize the IK: {ik.last_error}")
    logging.info(f"\n{ik}")

    failures = 0
    while t < DURATION:
        position, velocity = circle(t)
        tip_task.set_set_point(
            pin.SE3(np.eye(3), position), np.concatenate([velocity, np.zeros(3)])
        )
        if ik.advance(configuration):
            configuration.integrate_inplace(ik.get_output().velocity, DT)
        else:
            failures += 1

        t += DT
        if round(t / DT) % 50 == 0:
            actual = configuration.get_transform_frame_to_world("tip").translation
            logging.info(
                f"t={t:.2f} | target: {position.round(3)} | actual: {actual.round(3)} "
                f"| error: {np.linalg.norm(position - actual):.4f}"
            )

    logging.info(f"Done, {failures} failed cycles.")


if __name__ == "__main__":
    main()
