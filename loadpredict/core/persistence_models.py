"""
SQLAlchemy ORM 모델: load_averages (요일/구간별 누적 부하), raw_sensor (원시 측정값)

두 테이블 모두 외부 수집 파이프라인이 적재한다. 이 프로젝트는 읽기만 하며,
모델 정의는 로컬 실행/테스트용 스키마 생성(create_all)에 쓰인다.
time_slice 는 UTC 자정 기준 초(seconds-of-day), weekday 는 1=일요일 ... 7=토요일.
"""
from sqlalchemy import BigInteger, Column, Float, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class LoadAverage(Base):
    __tablename__ = "load_averages"
    __table_args__ = (
        Index("idx_load_avg_slot", "weekday", "time_slice"),
        {"mysql_engine": "InnoDB", "mysql_comment": "요일/구간별 누적 부하 (total_load, event_count)"}
    )

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    weekday = Column(Integer, nullable=False, comment="1=Sunday ... 7=Saturday")
    time_slice = Column(Integer, nullable=False, comment="seconds of day (UTC)")
    total_load = Column(Float, nullable=False)
    event_count = Column(Integer, nullable=False)


class RawSensorReading(Base):
    __tablename__ = "raw_sensor"
    __table_args__ = (
        Index("idx_raw_sensor_slot", "weekday", "time_slice"),
        {"mysql_engine": "InnoDB", "mysql_comment": "원시 센서 측정값 (1행 = 1회 측정)"}
    )

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    timestamp = Column(BigInteger, nullable=True, comment="epoch seconds")
    house_id = Column(String(64), nullable=True)
    weekday = Column(Integer, nullable=False, comment="1=Sunday ... 7=Saturday")
    time_slice = Column(Integer, nullable=False, comment="seconds of day (UTC)")
    value = Column(Float, nullable=False)


def init_metadata(engine, sync: bool = False) -> None:
    """Create tables if they do not exist.
    DB_INIT_SCHEMA=true 일 때 data_sources.factory 가 호출한다 (로컬/테스트 전용).
    """
    if sync:
        Base.metadata.create_all(bind=engine)
