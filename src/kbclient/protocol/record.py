""" Aggregation of decoded header/payload pairs into per-source records.
"""

import logging

logger = logging.getLogger(__name__)


class SourceRecord:
    """ Everything one bridge source contributed to a single reply: the
        *metadata* from its header, the structured *fields* from its payload,
        and any *arrays* sent alongside. To first order a
        :class:`SourceRecord` acts like a dictionary of its fields.

        The record owns the frames and decoded trees every :class:`Value`
        and :class:`ArrayView` it holds refers to. Records can be handed
        from one owner to another, but not copied.

        :ivar source: The source identifier declared in the header.
        :ivar metadata: Dictionary of :class:`Value` instances.
        :ivar fields: Dictionary of :class:`Value` instances.
        :ivar arrays: Dictionary of :class:`ArrayView` instances.
    """

    def __init__(self, source):

        self.source = source
        self.metadata = dict()
        self.fields = dict()
        self.arrays = dict()

        self.frames = list()
        self.trees = list()


    def __repr__(self):
        return '<SourceRecord %s: %d fields, %d arrays>' % (self.source, len(self.fields), len(self.arrays))


    def __copy__(self):
        raise TypeError('SourceRecord instances cannot be copied')


    def __deepcopy__(self, memo):
        raise TypeError('SourceRecord instances cannot be copied')


    def __contains__(self, key):
        return key in self.fields

    def __getitem__(self, key):
        return self.fields[key]

    def __iter__(self):
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

    def items(self):
        return self.fields.items()

    def keys(self):
        return self.fields.keys()


    def adopt(self, frame, tree=None):
        """ Take ownership of a *frame*, and the decoded *tree* derived from
            it, if any.
        """

        self.frames.append(frame)

        if tree is not None:
            self.trees.append(tree)


    def bytes_received(self):
        """ Return the total size of all frames owned by this record.
        """

        total = 0

        for frame in self.frames:
            total += memoryview(frame).nbytes

        return total


# end of class SourceRecord



class Aggregator:
    """ Collect :class:`SourceRecord` instances for a single reply. Every
        record pair opens a new record, closing whichever record was open
        before; array pairs attach to the open record. The caller is expected
        to invoke :func:`finish` to close the last record and retrieve the
        results.

        Source identifiers are not guaranteed to be unique within a reply.
        The first record for a source is stored under its identifier,
        subsequent records for the same source are stored with a numeric
        suffix: 'name-2', 'name-3', and so on.
    """

    def __init__(self):

        self.records = dict()
        self.current = None
        self.source = None


    def begin(self, source):
        """ Close the open record, if any, and open a new one for *source*.
        """

        if self.current is not None:
            self.close()

        self.current = SourceRecord(source)
        self.source = source
        return self.current


    def record(self, source):
        """ Return the open record, opening one for *source* if there is none.
        """

        if self.current is None:
            return self.begin(source)

        return self.current


    def close(self):
        """ Close the open record and store it in the results.
        """

        record = self.current
        self.current = None

        if record is None:
            return

        key = self.source

        if key in self.records:
            suffix = 2
            while '%s-%d' % (key, suffix) in self.records:
                suffix += 1
            key = '%s-%d' % (key, suffix)

        logger.debug("closing record for %s as %r", record.source, key)
        self.records[key] = record


    def finish(self):
        """ Close the open record and return the dictionary of all records,
            keyed by source.
        """

        self.close()
        records = self.records
        self.records = dict()
        return records


# end of class Aggregator


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
