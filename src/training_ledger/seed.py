"""Built-in starting data used when nothing has been stored yet."""

from datetime import date
from decimal import Decimal

from training_ledger.models.training import Session, Training

SEED_YEAR = 2026

# (id, name, instructor, schedule, color, hourly rate, extra, sessions)
# where each session is (month, day, "HH:MM - HH:MM", hours)
_SEED_TRAININGS = [
    ("formacao-0", "Formação Margarida", "Margarida", "Seg. e Quartas 15h às 17h",
     "bg-emerald-500", "35", None,
     [(2, 2, "15:00 - 17:00", 2), (2, 4, "15:00 - 17:00", 2), (2, 9, "15:00 - 17:00", 2),
      (2, 11, "15:00 - 17:00", 2), (2, 18, "15:00 - 17:00", 2), (2, 23, "15:00 - 17:00", 2),
      (2, 25, "15:00 - 17:00", 2), (3, 2, "15:00 - 17:00", 2), (3, 4, "15:00 - 17:00", 2)]),
    ("formacao-1", "Formação Samuel", "Samuel", "Quarta e Sexta 10:30h às 12:30h",
     "bg-blue-500", "35", None,
     [(1, 30, "10:30 - 12:30", 2), (2, 4, "10:30 - 12:30", 2), (2, 6, "10:30 - 12:30", 2),
      (2, 11, "10:30 - 12:30", 2), (2, 13, "10:30 - 12:30", 2), (2, 18, "10:30 - 12:30", 2),
      (2, 25, "10:30 - 12:30", 2), (2, 27, "10:30 - 12:30", 2), (3, 4, "10:30 - 12:30", 2)]),
    ("formacao-2", "Formação Frato", "Frato", "Terça e Quinta 13:30h às 17:30h",
     "bg-orange-500", "65", "400",
     [(2, 3, "13:30 - 17:30", 4), (2, 5, "13:30 - 17:30", 4), (2, 10, "13:30 - 17:30", 4),
      (2, 12, "13:30 - 17:30", 4), (2, 17, "13:30 - 17:30", 4), (2, 24, "13:30 - 17:30", 4)]),
    ("projeto-cin", "Projeto CIN (Atraso)", "CIN", "Pagamento único",
     "bg-red-500", "0", "500",
     [(2, 1, "09:00 - 10:00", 1)]),
    ("defesa-titulo", "Defesa Título Especialista", "Júri", "Data Marcada",
     "bg-purple-600", "0", None,
     [(2, 20, "09:00 - 18:00", 9)]),
    ("formacao-4", "Módulos Visualização 3D", "Vários", "10h às 12h (vários dias)",
     "bg-pink-500", "50", None,
     [(m, d, "10:00 - 12:00", 2) for m, d in [
         (2, 24), (2, 26), (3, 3), (3, 5), (3, 10), (3, 13), (3, 17), (3, 19),
         (3, 24), (3, 26), (3, 31), (4, 2), (4, 7), (4, 9), (4, 14), (4, 16)]]),
    ("formacao-susana", "Formação Susana", "Susana", "Seg. e Quartas (2h/sessão)",
     "bg-lime-500", "35", None,
     [(m, d, "10:00 - 12:00", 2) for m, d in [
         (3, 11), (3, 16), (3, 18), (3, 23), (3, 25), (3, 30), (4, 1), (4, 6), (4, 8), (4, 13),
         (4, 15), (4, 20), (4, 22), (4, 27), (4, 29), (5, 4), (5, 6), (5, 11), (5, 13), (5, 18)]]),
    ("viz-ia-arq-1", "Visualização com IA para Arquitetos", "Tatiana Nogueira",
     "3as e 5as 18h30-20h30, Sábados 10h-13h", "bg-cyan-500", "50", None,
     [(3, 24, "18:30 - 20:30", 2), (3, 26, "18:30 - 20:30", 2), (3, 28, "10:00 - 13:00", 3),
      (3, 31, "18:30 - 20:30", 2), (4, 2, "18:30 - 20:30", 2), (4, 4, "10:00 - 13:00", 3)]),
    ("ia-multimodal-1", "Formação Avançada IA Multimodal", "Susana Silva",
     "3as e 6as 18h30-20h30, Sábados 10h30-12h30", "bg-amber-500", "55", None,
     [(5, 12, "18:30 - 20:30", 2), (5, 15, "18:30 - 20:30", 2), (5, 16, "10:30 - 12:30", 2),
      (5, 19, "18:30 - 20:30", 2), (5, 22, "18:30 - 20:30", 2), (5, 23, "10:30 - 12:30", 2),
      (5, 26, "18:30 - 20:30", 2), (5, 28, "18:30 - 20:30", 2)]),
    ("viz-ia-arq-2", "Visualização com IA para Arquitetos Ed.2", "Catarina Barradas",
     "3as e 5as 18h30-20h30, Sábados 10h-13h", "bg-teal-500", "50", None,
     [(6, 16, "18:30 - 20:30", 2), (6, 18, "18:30 - 20:30", 2), (6, 20, "10:00 - 13:00", 3),
      (6, 25, "18:30 - 20:30", 2), (6, 27, "10:00 - 13:00", 3), (6, 30, "18:30 - 20:30", 2)]),
    ("viz-ia-arq-3", "Visualização com IA para Arquitetos Ed.3", "Tatiana Nogueira",
     "3as e 5as 18h30-20h30, Sábados 10h-13h", "bg-indigo-500", "50", None,
     [(9, 10, "18:30 - 20:30", 2), (9, 12, "10:00 - 13:00", 3), (9, 15, "18:30 - 20:30", 2),
      (9, 17, "18:30 - 20:30", 2), (9, 19, "10:00 - 13:00", 3), (9, 22, "18:30 - 20:30", 2)]),
    ("ia-multimodal-2", "Formação Avançada IA Multimodal Ed.2", "Catarina Barradas",
     "3as e 6as 18h30-20h30, Sábados 10h30-12h30", "bg-rose-500", "55", None,
     [(10, 13, "18:30 - 20:30", 2), (10, 16, "18:30 - 20:30", 2), (10, 17, "10:30 - 12:30", 2),
      (10, 20, "18:30 - 20:30", 2), (10, 23, "18:30 - 20:30", 2), (10, 24, "10:30 - 12:30", 2),
      (10, 27, "18:30 - 20:30", 2), (10, 29, "18:30 - 20:30", 2)]),
    ("viz-ia-arq-4", "Visualização com IA para Arquitetos Ed.4", "Catarina Barradas",
     "3as e 5as 18h30-20h30, Sábados 10h-13h", "bg-violet-500", "50", None,
     [(12, 3, "18:30 - 20:30", 2), (12, 5, "10:00 - 13:00", 3), (12, 10, "18:30 - 20:30", 2),
      (12, 12, "10:00 - 13:00", 3), (12, 15, "18:30 - 20:30", 2), (12, 17, "18:30 - 20:30", 2)]),
]


def seed_trainings() -> list[Training]:
    """Fresh copies of the built-in trainings (session ids "<training>-s<n>")."""
    trainings = []
    for training_id, name, instructor, schedule, color, rate, extra, raw_sessions in _SEED_TRAININGS:
        sessions = [
            Session(
                id=f"{training_id}-s{i}",
                date=date(SEED_YEAR, month, day),
                time=time_slot,
                duration_minutes=hours * 60,
            )
            for i, (month, day, time_slot, hours) in enumerate(raw_sessions)
        ]
        trainings.append(
            Training(
                id=training_id,
                name=name,
                instructor=instructor,
                hourly_rate=Decimal(rate),
                color=color,
                extra_value=None if extra is None else Decimal(extra),
                sessions=sessions,
                total_sessions=len(sessions),
                schedule=schedule,
            )
        )
    return trainings
