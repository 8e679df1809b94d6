# a2s_monitor/singleton.py


class Singleton:
    """
    Базовый класс-одиночка: повторный вызов конструктора возвращает тот же экземпляр.
    Подклассы сами защищаются от повторной инициализации в __init__.
    """
    _instances = {}

    def __new__(cls, *args, **kwargs):
        if cls not in Singleton._instances:
            Singleton._instances[cls] = super().__new__(cls)
        return Singleton._instances[cls]
