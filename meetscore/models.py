from datetime import datetime

from . import db
from .records import EventRecord
from .scoring import EventTypeDefinition
from .util.const_util import CONST


class Season(db.Model):
    __tablename__ = 'seasons'

    season_id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    start = db.Column(db.DateTime)
    end = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    meets = db.relationship('Meet', back_populates='season', cascade='all, delete-orphan')
    athletes = db.relationship('Athlete', back_populates='season', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Season {self.season_id} {self.name}>"


class Meet(db.Model):
    __tablename__ = 'meets'

    meet_id = db.Column(db.Integer, primary_key=True)
    season_id = db.Column(db.Integer, db.ForeignKey('seasons.season_id'), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    date = db.Column(db.DateTime)
    location = db.Column(db.String(200))
    num_teams = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    season = db.relationship('Season', back_populates='meets')
    results = db.relationship('EventResult', back_populates='meet', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Meet {self.meet_id} {self.name}>"


class Athlete(db.Model):
    __tablename__ = 'athletes'

    athlete_id = db.Column(db.Integer, primary_key=True)
    season_id = db.Column(db.Integer, db.ForeignKey('seasons.season_id'))
    name = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    season = db.relationship('Season', back_populates='athletes')
    results = db.relationship('EventResult', back_populates='athlete', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Athlete {self.athlete_id} {self.name}>"


class EventType(db.Model):
    __tablename__ = 'event_types'

    name = db.Column(db.String(100), primary_key=True)
    event_kind = db.Column(db.String(20), nullable=False, default=CONST.EVENT_KIND.INDIVIDUAL)
    measurement_kind = db.Column(db.String(20), nullable=False, default=CONST.MEASUREMENT_KIND.MEASURED)

    def to_definition(self):
        return EventTypeDefinition(
            name=self.name,
            event_kind=self.event_kind,
            measurement_kind=self.measurement_kind,
        )


class EventResult(db.Model):
    __tablename__ = 'events'

    event_id = db.Column(db.Integer, primary_key=True)
    athlete_id = db.Column(db.Integer, db.ForeignKey('athletes.athlete_id'), nullable=False)
    meet_id = db.Column(db.Integer, db.ForeignKey('meets.meet_id'), nullable=False)
    event_type = db.Column(db.String(100), db.ForeignKey('event_types.name'), nullable=False)
    place = db.Column(db.Integer, nullable=False)
    points = db.Column(db.Float)
    details = db.Column(db.String(100))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    athlete = db.relationship('Athlete', back_populates='results')
    meet = db.relationship('Meet', back_populates='results')

    def to_record(self):
        return EventRecord(
            athlete_id=self.athlete_id,
            athlete_name=self.athlete.name if self.athlete else None,
            event_type=self.event_type,
            meet_id=self.meet_id,
            season_id=self.meet.season_id if self.meet else None,
            placement=self.place,
            points=self.points,
            detail=self.details,
            timestamp=self.created_at,
        )

    def __repr__(self):
        return f"<EventResult {self.event_id} {self.event_type} place={self.place}>"
