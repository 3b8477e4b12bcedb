"""Starter question bank and rounds used when no datastore is configured."""

from __future__ import annotations

from smartshoot_app.constants.game_constants import DEFAULT_POINTS, DEFAULT_TIME_LIMIT_SECONDS
from smartshoot_app.core.models import Question, QuestionCategory, QuestionType, Round

C1, C2, C3, C4, C5, C6 = (
    QuestionCategory.C1,
    QuestionCategory.C2,
    QuestionCategory.C3,
    QuestionCategory.C4,
    QuestionCategory.C5,
    QuestionCategory.C6,
)

_TRUE_FALSE_ITEMS: list[tuple[str, QuestionCategory, str, bool]] = [
    ("q1", C1, "Aset adalah sumber daya yang dikuasai oleh entitas sebagai akibat dari peristiwa masa lalu.", True),
    ("q2", C1, "Liabilitas adalah hak residual atas aset entitas setelah dikurangi semua liabilitas.", False),
    ("q3", C2, "Pendapatan diakui ketika terjadi peningkatan manfaat ekonomi.", True),
    ("q4", C2, "Beban adalah penurunan manfaat ekonomi selama periode akuntansi.", True),
    ("q5", C3, "Jurnal umum digunakan untuk mencatat transaksi secara kronologis.", True),
    ("q6", C3, "Buku besar adalah kumpulan akun-akun yang saling berhubungan.", True),
    ("q7", C4, "Neraca saldo disusun setelah posting ke buku besar.", True),
    ("q8", C4, "Jurnal penyesuaian dibuat di awal periode akuntansi.", False),
    ("q9", C5, "Laporan laba rugi menunjukkan posisi keuangan perusahaan.", False),
    ("q10", C5, "Laporan arus kas terdiri dari tiga aktivitas: operasi, investasi, dan pendanaan.", True),
    ("q11", C6, "Jurnal penutup dibuat untuk menutup akun nominal.", True),
    ("q12", C6, "Akun riil tidak perlu ditutup pada akhir periode.", True),
]


def demo_questions() -> list[Question]:
    return [
        Question(
            id=question_id,
            category=category,
            type=QuestionType.TRUE_FALSE,
            prompt=prompt,
            correct_answer=answer,
            time_limit=DEFAULT_TIME_LIMIT_SECONDS,
            points=DEFAULT_POINTS,
        )
        for question_id, category, prompt, answer in _TRUE_FALSE_ITEMS
    ]


def demo_rounds() -> list[Round]:
    return [
        Round(
            id="round1",
            name="Babak 1 - Dasar Akuntansi",
            question_counts={C1: 2, C2: 2, C3: 2, C4: 0, C5: 0, C6: 0},
        ),
        Round(
            id="round2",
            name="Babak 2 - Siklus Akuntansi",
            question_counts={C1: 1, C2: 1, C3: 2, C4: 2, C5: 0, C6: 0},
        ),
        Round(
            id="round3",
            name="Babak 3 - Laporan Keuangan",
            question_counts={C1: 0, C2: 0, C3: 1, C4: 1, C5: 2, C6: 2},
        ),
    ]
