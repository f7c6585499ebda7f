import numpy as np
import pinocchio as pin

from qp_ik import QPBackend, QPSolution


def build_planar_arm(num_links: int = 2, link_length: float = 1.0) -> pin.Model:
    """Planar arm of revolute-z joints with a "tip" frame at the last link end."""
    model = pin.Model()
    joint_id = 0
    frame_id = 0
    placement = pin.SE3.Identity()
    for i in range(num_links):
        joint_id = model.addJoint(joint_id, pin.JointModelRZ(), placement, f"joint{i + 1}")
        model.appendBodyToJoint(
            joint_id,
            pin.Inertia.FromSphere(1.0, 0.05),
            pin.SE3(np.eye(3), np.array([link_length / 2, 0.0, 0.0])),
        )
        frame_id = model.addJointFrame(joint_id, frame_id)
        placement = pin.SE3(np.eye(3), np.array([link_length, 0.0, 0.0]))
    model.addBodyFrame("tip", joint_id, placement, frame_id)
    model.lowerPositionLimit = np.full(num_links, -np.pi)
    model.upperPositionLimit = np.full(num_links, np.pi)
    return model


class LinearSystemBackend(QPBackend):
    """Solves equality-constrained problems through the KKT system and records them."""

    name = "kkt"

    def __init__(self):
        self.problems = []

    def solve(self, problem):
        self.problems.append(problem)
        n = problem.num_variables
        m = problem.A_eq.shape[0]
        kkt = np.block(
            [
                [problem.H, problem.A_eq.T],
                [problem.A_eq, np.zeros((m, m))],
            ]
        )
        rhs = np.concatenate([-problem.g, problem.b_eq])
        if np.linalg.matrix_rank(kkt) < n + m:
            return QPSolution(None, False, "singular")
        return QPSolution(np.linalg.solve(kkt, rhs)[:n], True, "solved")


class FailingBackend(QPBackend):
    name = "failing"

    def solve(self, problem):
        return QPSolution(None, False, "infeasible")
