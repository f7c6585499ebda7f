import numpy as np
import pinocchio as pin
import pytest

from qp_ik import (
    AffineTask,
    CoMTask,
    Configuration,
    EvaluationError,
    InvalidFrame,
    JointLimitsTask,
    JointTrackingTask,
    JointVelocityLimitsTask,
    JointVelocityRegularizationTask,
    SE3Task,
    TargetNotSet,
    TaskDefinitionError,
    TaskType,
)


def test_affine_task():
    task = AffineTask([[1.0, 2.0]], [3.0], variables=["x"])
    assert task.size == 1
    assert task.variables == ["x"]
    assert task.supports_equality and not task.supports_inequality

    data = task.evaluate()
    np.testing.assert_array_equal(data.A, [[1.0, 2.0]])
    np.testing.assert_array_equal(data.b, [3.0])
    assert data.type is TaskType.EQUALITY

    task.set([[0.0, 1.0]], [4.0])
    np.testing.assert_array_equal(task.evaluate().b, [4.0])
    with pytest.raises(TaskDefinitionError):
        task.set([[1.0, 0.0], [0.0, 1.0]], [1.0, 2.0])


def test_inequality_affine_task_capabilities():
    task = AffineTask([[1.0]], [2.0], task_type=TaskType.INEQUALITY)
    assert task.supported_types == [TaskType.INEQUALITY]
    assert task.evaluate().type is TaskType.INEQUALITY


def test_check_data_rejects_wrong_shapes():
    task = AffineTask([[1.0, 2.0]], [3.0])
    task.check_data(task.evaluate(), 2)
    with pytest.raises(EvaluationError):
        task.check_data(task.evaluate(), 3)
    with pytest.raises(EvaluationError):
        task.check_data(tuple(task.evaluate()), 2)
    with pytest.raises(EvaluationError):
        task.check_data(None, 2)


def test_task_without_variables_is_rejected():
    with pytest.raises(TaskDefinitionError):
        AffineTask([[1.0]], [1.0], variables=[])


def test_configuration_frame_queries(planar_arm):
    configuration = Configuration(planar_arm)
    np.testing.assert_allclose(
        configuration.get_transform_frame_to_world("tip").translation, [2.0, 0.0, 0.0]
    )
    J = configuration.get_frame_jacobian("tip")
    assert J.shape == (6, 2)
    np.testing.assert_allclose(J[:3, 0], [0.0, 2.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(J[:3, 1], [0.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(J[3:, 0], [0.0, 0.0, 1.0], atol=1e-12)

    with pytest.raises(InvalidFrame):
        configuration.get_frame_jacobian("foot")


def test_configuration_com(planar_arm):
    configuration = Configuration(planar_arm)
    np.testing.assert_allclose(configuration.get_com_position(), [1.0, 0.0, 0.0], atol=1e-12)
    assert configuration.get_com_jacobian().shape == (3, 2)


def test_configuration_limits(planar_arm):
    configuration = Configuration(planar_arm, q=np.array([4.0, 0.0]))
    assert not configuration.check_limits(safety_break=False)
    with pytest.raises(EvaluationError):
        configuration.check_limits()


def test_configuration_integration(planar_arm):
    configuration = Configuration(planar_arm)
    configuration.integrate_inplace(np.array([1.0, -1.0]), dt=0.1)
    np.testing.assert_allclose(configuration.q, [0.1, -0.1])
    np.testing.assert_allclose(configuration.v, [1.0, -1.0])


def test_se3_task_holds_current_pose(planar_arm):
    configuration = Configuration(planar_arm, q=np.array([0.3, -0.2]))
    task = SE3Task("tip", kp_linear=2.0, kp_angular=3.0)
    task.set_set_point_from_configuration(configuration)

    data = task.evaluate(configuration)
    assert data.type is TaskType.EQUALITY
    np.testing.assert_allclose(data.A, configuration.get_frame_jacobian("tip"))
    np.testing.assert_allclose(data.b, np.zeros(6), atol=1e-12)


def test_se3_task_error_and_feedforward(planar_arm):
    configuration = Configuration(planar_arm)
    task = SE3Task("tip", kp_linear=2.0, kp_angular=3.0)
    feedforward = np.array([0.0, 0.5, 0.0, 0.0, 0.0, 0.1])
    task.set_set_point(pin.SE3(np.eye(3), np.array([2.0, 0.1, 0.0])), feedforward)

    data = task.evaluate(configuration)
    np.testing.assert_allclose(data.b, feedforward + [0.0, 0.2, 0.0, 0.0, 0.0, 0.0], atol=1e-12)


def test_se3_task_needs_target_and_configuration(planar_arm):
    task = SE3Task("tip")
    with pytest.raises(TargetNotSet):
        task.evaluate(Configuration(planar_arm))

    task.set_set_point(pin.SE3.Identity())
    with pytest.raises(EvaluationError):
        task.evaluate()

    task.set_configuration(Configuration(planar_arm))
    assert task.evaluate().A.shape == (6, 2)


def test_se3_task_invalid_gain():
    with pytest.raises(TaskDefinitionError):
        SE3Task("tip", kp_linear=[1.0, 2.0])
    with pytest.raises(TaskDefinitionError):
        SE3Task("tip", kp_angular=-1.0)


def test_com_task(planar_arm):
    configuration = Configuration(planar_arm)
    task = CoMTask(kp=2.0, configuration=configuration)
    with pytest.raises(TargetNotSet):
        task.evaluate()

    task.set_set_point([1.0, 0.5, 0.0])
    data = task.evaluate()
    np.testing.assert_allclose(data.A, configuration.get_com_jacobian())
    np.testing.assert_allclose(data.b, [0.0, 1.0, 0.0], atol=1e-12)


def test_joint_tracking_task(planar_arm):
    configuration = Configuration(planar_arm)
    task = JointTrackingTask(planar_arm, kp=2.0)
    task.set_set_point([0.1, -0.2], target_velocity=[0.5, 0.0])

    data = task.evaluate(configuration)
    np.testing.assert_allclose(data.A, np.eye(2))
    np.testing.assert_allclose(data.b, [0.7, -0.4])

    with pytest.raises(TaskDefinitionError):
        task.set_set_point([0.0, 0.0, 0.0])


def test_joint_velocity_regularization_task(planar_arm):
    task = JointVelocityRegularizationTask(planar_arm)
    data = task.evaluate()
    np.testing.assert_allclose(data.A, np.eye(2))
    np.testing.assert_allclose(data.b, np.zeros(2))


def test_joint_velocity_limits_task(planar_arm):
    task = JointVelocityLimitsTask(planar_arm, {"joint1": 1.5})
    assert task.size == 2
    assert not task.supports_equality and task.supports_inequality

    data = task.evaluate()
    assert data.type is TaskType.INEQUALITY
    np.testing.assert_allclose(data.A, [[1.0, 0.0], [-1.0, 0.0]])
    np.testing.assert_allclose(data.b, [1.5, 1.5])


def test_joint_velocity_limits_task_invalid(planar_arm):
    with pytest.raises(TaskDefinitionError):
        JointVelocityLimitsTask(planar_arm, {"wrist": 1.0})
    with pytest.raises(TaskDefinitionError):
        JointVelocityLimitsTask(planar_arm, {})
    with pytest.raises(TaskDefinitionError):
        JointVelocityLimitsTask(planar_arm, {"joint1": [1.0, 2.0]})


def test_joint_limits_task(planar_arm):
    configuration = Configuration(planar_arm, q=np.array([1.0, 0.0]))
    task = JointLimitsTask(planar_arm, dt=0.1, gain=0.5)
    assert task.size == 4

    data = task.evaluate(configuration)
    assert data.type is TaskType.INEQUALITY
    np.testing.assert_allclose(data.A[:2], np.eye(2))
    np.testing.assert_allclose(data.A[2:], -np.eye(2))
    np.testing.assert_allclose(
        data.b,
        0.5 / 0.1 * np.array([np.pi - 1.0, np.pi, 1.0 + np.pi, np.pi]),
    )


def test_joint_limits_task_invalid_parameters(planar_arm):
    with pytest.raises(TaskDefinitionError):
        JointLimitsTask(planar_arm, dt=0.1, gain=1.5)
    with pytest.raises(TaskDefinitionError):
        JointLimitsTask(planar_arm, dt=0.0)
