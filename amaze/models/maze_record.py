import datetime

from amaze import db
from amaze.generation import Maze, Order, decode, encode


class MazeRecord(db.Model):
    __tablename__ = 'maze_records'
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.String(32), index=True)
    skill_level = db.Column(db.Integer, nullable=False, default=0)
    builder = db.Column(db.String(16), nullable=False, default='dfs')
    perfect = db.Column(db.Boolean, nullable=False, default=True)
    seed = db.Column(db.BigInteger, nullable=False)
    width = db.Column(db.Integer, nullable=False)
    height = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.datetime.utcnow)
    # Flat key/value payload from amaze.generation.serialization
    payload = db.Column(db.JSON, nullable=False, default=dict)

    def __repr__(self):
        return f'<MazeRecord {self.id} {self.width}x{self.height} seed={self.seed} builder={self.builder}>'

    @classmethod
    def from_maze(cls, order: Order, maze: Maze) -> 'MazeRecord':
        return cls(
            order_id=order.order_id,
            skill_level=order.skill_level,
            builder=order.builder.value,
            perfect=order.perfect,
            seed=order.seed,
            width=maze.width,
            height=maze.height,
            payload=encode(maze),
        )

    def to_maze(self) -> Maze:
        return decode(self.payload)

    def to_dict(self):
        return {
            'id': self.id,
            'order_id': self.order_id,
            'skill_level': self.skill_level,
            'builder': self.builder,
            'perfect': self.perfect,
            'seed': self.seed,
            'width': self.width,
            'height': self.height,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
