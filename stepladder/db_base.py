# 统一的声明式基类，所有 ORM 模型（users / activities / leaderboard）都继承自这里，
# 这样 Base.metadata.create_all 可以一次建好所有表。

from sqlalchemy.orm import declarative_base

Base = declarative_base()
