import numpy as np
from ..models.similarity import StatisticsFields
from ..repositories.plane_repository import PlaneRepository


class WindowedStatisticsService:
    """
    Gaussian-windowed local statistics for single-channel float planes.
    Delegates every pixel operation to PlaneRepository.
    """

    def __init__(self, plane_repository: PlaneRepository | None = None):
        self.plane_repository = plane_repository or PlaneRepository()

    def mean(self, a: np.ndarray) -> np.ndarray:
        return self.plane_repository.convolve_gaussian(a)

    def variance(self, a: np.ndarray, mean_a: np.ndarray | None = None) -> np.ndarray:
        """
        smooth(a²) − mean(a)².
        """
        if mean_a is None:
            mean_a = self.mean(a)
        smoothed_sq = self.plane_repository.convolve_gaussian(self.plane_repository.square(a))
        return self.plane_repository.subtract(smoothed_sq, self.plane_repository.square(mean_a))

    def covariance(
        self,
        a: np.ndarray,
        b: np.ndarray,
        mean_a: np.ndarray | None = None,
        mean_b: np.ndarray | None = None,
    ) -> np.ndarray:
        """
        smooth(a·b) − mean(a)·mean(b).
        """
        if mean_a is None:
            mean_a = self.mean(a)
        if mean_b is None:
            mean_b = self.mean(b)
        smoothed_ab = self.plane_repository.convolve_gaussian(self.plane_repository.multiply(a, b))
        return self.plane_repository.subtract(smoothed_ab, self.plane_repository.multiply(mean_a, mean_b))

    def compute_fields(self, a: np.ndarray, b: np.ndarray) -> StatisticsFields:
        """
        All five statistic planes for one channel of an image pair.
        Means are computed once and reused.
        """
        mean1 = self.mean(a)
        mean2 = self.mean(b)
        return StatisticsFields(
            mean1=mean1,
            mean2=mean2,
            variance1=self.variance(a, mean1),
            variance2=self.variance(b, mean2),
            covariance12=self.covariance(a, b, mean1, mean2),
        )
