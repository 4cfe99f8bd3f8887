from app import create_app
from extensions import db
from models import Judge, Event, Submission, SubmissionScore, JudgeEventAssignment, JudgeSubmissionAssignment, AuditRecord
from services import coordinator, review

# Создаем экземпляр приложения, чтобы получить контекст
app = create_app()

with app.app_context():
    db.create_all()

    # --- 1. ОЧИСТКА ДАННЫХ ---
    print("Очистка старых данных...")
    # Идем в обратном порядке зависимостей
    db.session.query(AuditRecord).delete()
    db.session.query(SubmissionScore).delete()
    db.session.query(JudgeSubmissionAssignment).delete()
    db.session.query(JudgeEventAssignment).delete()
    db.session.query(Submission).delete()
    db.session.query(Event).delete()
    db.session.query(Judge).delete()
    db.session.commit()
    print("Очистка завершена.")

    # --- 2. СОЗДАНИЕ ДАННЫХ ---
    print("Добавление тестовых данных...")

    try:
        # --- Мероприятие с двумя раундами разного веса ---
        hackathon = Event(
            name='Хакатон 2025',
            rounds=[
                {'id': 'idea', 'name': 'Идея', 'weight': 1,
                 'criteria': [{'id': 'novelty', 'max_score': 10}]},
                {'id': 'demo', 'name': 'Демо', 'weight': 3,
                 'criteria': [{'id': 'ux', 'max_score': 10}, {'id': 'tech', 'max_score': 20}]},
            ],
            custom_criteria=[{'id': 'impact', 'max_score': 10}]
        )
        db.session.add(hackathon)
        db.session.commit()

        # --- Работы команд ---
        s1 = Submission(event_id=hackathon.id, team_id=1, project_name='Умная парковка')
        s2 = Submission(event_id=hackathon.id, team_id=2, project_name='Бот для очередей')
        s3 = Submission(event_id=hackathon.id, team_id=3, project_name='Карта волонтеров')
        db.session.add_all([s1, s2, s3])

        # --- Судьи ---
        judge1 = Judge(user_id=200001, expertise=['backend', 'ml'])
        judge2 = Judge(user_id=200002, expertise=['design'])
        db.session.add_all([judge1, judge2])
        db.session.commit()

        coordinator.assign_judge_to_event(hackathon.id, judge1.id, 'Primary')
        coordinator.assign_judge_to_event(hackathon.id, judge2.id, 'Secondary')

        created = coordinator.fan_out_assignments(hackathon.id)
        print(f"Создано назначений на работы: {created}")

        # Пример рецензий
        review.submit_review(judge1.id, s1.id, 80, 'Сильная идея', {'novelty': 9}, 'idea')
        review.submit_review(judge2.id, s1.id, 60, 'Сырое демо', {'ux': 6}, 'demo')

        print("Тестовые данные успешно добавлены!")
    except Exception as e:
        db.session.rollback()
        print(f"Произошла ошибка при добавлении данных: {e}")
