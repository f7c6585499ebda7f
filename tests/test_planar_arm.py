import numpy as np
import pinocchio as pin
import pytest

from qp_ik import (
    Configuration,
    JointLimitsTask,
    JointTrackingTask,
    JointVelocityLimitsTask,
    JointVelocityRegularizationTask,
    QPInverseKinematics,
    SE3Task,
)

ROBOT_VELOCITY = "robot_velocity"


@pytest.fixture
def ik():
    solver = QPInverseKinematics()
    assert solver.initialize({"primary_variable_name": ROBOT_VELOCITY})
    return solver


def test_velocity_limit_clips_posture_tracking(ik, planar_arm):
    configuration = Configuration(planar_arm)
    posture = JointTrackingTask(planar_arm, kp=1.0)
    posture.set_set_point([1.0, 0.0])
    limits = JointVelocityLimitsTask(planar_arm, {"joint1": 0.1})

    assert ik.add_task(limits, "velocity_limits", 0)
    assert ik.add_task(posture, "posture", 1, [1.0, 1.0])
    assert ik.finalize({ROBOT_VELOCITY: planar_arm.nv})

    assert ik.advance(configuration)
    np.testing.assert_allclose(ik.get_output().velocity, [0.1, 0.0], atol=1e-4)


def test_tip_reaches_target(ik, planar_arm):
    dt = 0.01
    configuration = Configuration(planar_arm, q=np.array([0.3, 0.3]))
    tip = SE3Task("tip", kp_linear=5.0, kp_angular=0.0)
    target = np.array([1.5, 0.5, 0.0])
    tip.set_set_point(pin.SE3(np.eye(3), target))
    regularization = JointVelocityRegularizationTask(planar_arm)
    joint_limits = JointLimitsTask(planar_arm, dt=dt)

    assert ik.add_task(joint_limits, "joint_limits", 0)
    assert ik.add_task(tip, "tip", 1, [1.0, 1.0, 1.0, 0.0, 0.0, 0.0])
    assert ik.add_task(regularization, "regularization", 1, [1e-6, 1e-6])
    assert ik.finalize({ROBOT_VELOCITY: planar_arm.nv})

    for _ in range(300):
        assert ik.advance(configuration)
        configuration.integrate_inplace(ik.get_output().velocity, dt)

    actual = configuration.get_transform_frame_to_world("tip").translation
    np.testing.assert_allclose(actual, target, atol=1e-2)
    assert configuration.check_limits(safety_break=False)


def test_hard_tip_task_with_bound_configuration(ik, planar_arm):
    configuration = Configuration(planar_arm, q=np.array([0.3, 0.3]))
    posture = JointTrackingTask(planar_arm, configuration=configuration)
    posture.set_set_point([0.5, 0.1])

    assert ik.add_task(posture, "posture", 0)
    assert ik.finalize({ROBOT_VELOCITY: planar_arm.nv})

    assert ik.advance()
    np.testing.assert_allclose(ik.get_output().velocity, [0.2, -0.2], atol=1e-4)
