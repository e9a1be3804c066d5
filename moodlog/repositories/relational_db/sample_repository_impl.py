# moodlog/repositories/relational_db/sample_repository_impl.py
from typing import Callable, List
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from moodlog.db.models import SampleModel
from moodlog.errors import RecordStoreError
from moodlog.models.sample import Location, Sample
from moodlog.repositories.sample_repository import SampleRepository
import logging

logger = logging.getLogger(__name__)

class SampleRepositoryImpl(SampleRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def insert(self, timestamp: str, mood: int, video_ref: str, location: Location) -> Sample:
        session = self.session_factory()
        try:
            sample_model = SampleModel(
                ts=timestamp,
                mood=mood,
                videoUri=video_ref,
                lat=location.lat,
                lng=location.lng
            )

            session.add(sample_model)
            session.commit()
            session.refresh(sample_model)

            return self._to_domain(sample_model)

        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error inserting sample: {e}")
            raise RecordStoreError(f"Could not save the sample: {e}") from e
        finally:
            session.close()

    def list_all(self) -> List[Sample]:
        session = self.session_factory()
        try:
            samples = session.query(SampleModel).order_by(SampleModel.id).all()
            return [self._to_domain(sample) for sample in samples]
        except SQLAlchemyError as e:
            logger.error(f"Error listing samples: {e}")
            raise RecordStoreError(f"Could not read samples: {e}") from e
        finally:
            session.close()

    def count(self) -> int:
        session = self.session_factory()
        try:
            return session.query(func.count(SampleModel.id)).scalar() or 0
        except SQLAlchemyError as e:
            logger.error(f"Error counting samples: {e}")
            raise RecordStoreError(f"Could not count samples: {e}") from e
        finally:
            session.close()

    def _to_domain(self, model: SampleModel) -> Sample:
        """Convert SQLAlchemy model to domain model"""
        return Sample(
            id=model.id,
            timestamp=model.ts,
            mood=model.mood,
            video_ref=model.videoUri,
            location=Location(lat=model.lat, lng=model.lng)
        )
